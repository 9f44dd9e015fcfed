"""FastAPI application - local HTTP surface over the application controller."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from anecdote.errors import ValidationError
from anecdote.launch import SHARED_TOPIC
from anecdote.services import ApplicationController, create_controller, highlight_story

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Dependency injection - created at startup
_controller: ApplicationController | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    global _controller
    _controller = create_controller()
    yield
    _controller = None


app = FastAPI(
    title="Anecdote",
    description="Stories behind the syllabus - AI-generated educational anecdotes",
    version="0.1.0",
    lifespan=lifespan,
)


def get_controller() -> ApplicationController:
    if _controller is None:
        raise HTTPException(status_code=503, detail="Service starting up")
    return _controller


class NameRequest(BaseModel):
    name: str


class TopicRequest(BaseModel):
    topic: str | None = None


class LanguageRequest(BaseModel):
    language: str


class LabelRequest(BaseModel):
    label: str


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def state_payload(controller: ApplicationController) -> dict[str, Any]:
    """Snapshot of everything the page renders."""
    state = controller.state
    user = controller.user
    anecdote = state.current_anecdote
    payload: dict[str, Any] = {
        "user": user.model_dump(by_alias=True) if user else None,
        "view": state.view.value,
        "topic": state.topic,
        "language": state.language,
        "status": state.status.value,
        "error": state.error,
        "showMeanings": state.show_meanings,
        "currentAnecdote": anecdote.to_api() if anecdote else None,
        "storySegments": None,
        "suggestions": [s.model_dump(mode="json") for s in controller.suggestions],
        "historyCount": len(controller.history),
    }
    if anecdote and state.show_meanings:
        payload["storySegments"] = [
            s.model_dump() for s in highlight_story(anecdote.story, anecdote.tough_words)
        ]
    return payload


def _ensure_idle(controller: ApplicationController) -> None:
    if controller.state.is_loading:
        raise HTTPException(status_code=409, detail="A story is already being generated")


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check."""
    return {"status": "ok"}


@app.post("/bootstrap")
async def bootstrap(
    shared_topic: str | None = None,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    """
    Page load. Restores the session; a shared_topic (from the page's query
    string or SHARED_TOPIC setting) is auto-submitted once.
    """
    await controller.bootstrap(shared_topic)
    return state_payload(controller)


@app.get("/launch")
async def launch(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    """Pending launch parameters. shared_topic is null once consumed."""
    return {SHARED_TOPIC: controller.launch_params.get(SHARED_TOPIC)}


@app.get("/state")
async def get_state(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    return state_payload(controller)


@app.post("/session/login")
async def login(
    body: NameRequest,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    controller.login(body.name)
    return state_payload(controller)


@app.post("/session/guest")
async def login_guest(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    controller.login_as_guest()
    return state_payload(controller)


@app.delete("/session")
async def logout(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    controller.logout()
    return state_payload(controller)


@app.post("/generate")
async def generate(
    body: TopicRequest,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    """Generate for body.topic, or the current topic when omitted."""
    _ensure_idle(controller)
    await controller.submit(body.topic)
    return state_payload(controller)


@app.put("/language")
async def set_language(
    body: LanguageRequest,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    controller.set_language(body.language)
    return state_payload(controller)


@app.get("/languages")
async def languages(controller: ApplicationController = Depends(get_controller)) -> list[str]:
    return controller.supported_languages


@app.post("/view/toggle")
async def toggle_view(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    controller.toggle_view()
    return state_payload(controller)


@app.post("/home")
async def go_home(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    controller.go_home()
    return state_payload(controller)


@app.post("/explore")
async def explore(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    controller.explore_new_topic()
    return state_payload(controller)


@app.post("/meanings/toggle")
async def toggle_meanings(controller: ApplicationController = Depends(get_controller)) -> dict[str, Any]:
    controller.toggle_meanings()
    return state_payload(controller)


@app.get("/history")
async def history(controller: ApplicationController = Depends(get_controller)) -> list[dict[str, Any]]:
    return [h.to_api() for h in controller.history]


@app.post("/history/{index}/select")
async def select_history(
    index: int,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    _ensure_idle(controller)
    await controller.select_history_entry(index)
    return state_payload(controller)


@app.get("/suggestions")
async def suggestions(controller: ApplicationController = Depends(get_controller)) -> list[dict[str, Any]]:
    return [s.model_dump(mode="json") for s in controller.suggestions]


@app.post("/suggestions/select")
async def select_suggestion(
    body: LabelRequest,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    _ensure_idle(controller)
    await controller.select_suggestion(body.label)
    return state_payload(controller)


@app.post("/related/select")
async def select_related(
    body: LabelRequest,
    controller: ApplicationController = Depends(get_controller),
) -> dict[str, Any]:
    _ensure_idle(controller)
    await controller.select_related_topic(body.label)
    return state_payload(controller)


@app.get("/share")
async def share(controller: ApplicationController = Depends(get_controller)) -> dict[str, str]:
    return controller.share()
