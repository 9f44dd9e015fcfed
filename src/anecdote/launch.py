"""Launch parameters and share links."""

from abc import ABC, abstractmethod
from urllib.parse import urlencode, urlsplit, urlunsplit

SHARED_TOPIC = "shared_topic"


class LaunchParameters(ABC):
    """Startup parameters, consumed once (e.g. a shared link's query string)."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        ...

    @abstractmethod
    def set(self, name: str, value: str) -> None:
        ...

    @abstractmethod
    def clear(self, name: str) -> None:
        """Remove a consumed parameter so a reload does not replay it."""
        ...


class MappingLaunchParameters(LaunchParameters):
    """In-memory launch parameters."""

    def __init__(self, params: dict[str, str | None] | None = None) -> None:
        self._params = {k: v for k, v in (params or {}).items() if v is not None}

    def get(self, name: str) -> str | None:
        return self._params.get(name)

    def set(self, name: str, value: str) -> None:
        self._params[name] = value

    def clear(self, name: str) -> None:
        self._params.pop(name, None)


def build_share_url(public_url: str, topic: str) -> str:
    """Link that reopens the app and auto-submits topic."""
    parts = urlsplit(public_url)
    return urlunsplit(parts._replace(query=urlencode({SHARED_TOPIC: topic})))
