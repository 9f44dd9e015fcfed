"""Run with: python -m anecdote"""

import uvicorn

from anecdote.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "anecdote.main:app",
        host=settings.host,
        port=settings.port,
    )
