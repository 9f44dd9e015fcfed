"""Application controller - orchestrates session, history, generation and view state."""

import logging
from collections.abc import Sequence
from typing import Any

from anecdote.analytics import AnalyticsSink, NullAnalytics, create_analytics
from anecdote.config import Settings, get_catalog, get_settings
from anecdote.errors import GenerationError, ValidationError
from anecdote.launch import SHARED_TOPIC, LaunchParameters, MappingLaunchParameters, build_share_url
from anecdote.llm import LLMClient, OpenAIClient
from anecdote.models import Anecdote, AppState, GenerationStatus, Suggestion, User, View
from anecdote.persistence import HistoryStore, KeyValueStore, SessionStore, create_kv_store
from anecdote.services.generation_client import GenerationClient
from anecdote.services.suggestions import default_suggestions, derive_suggestions

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_URL = "http://localhost:8000/"


class Presenter:
    """UI affordances the controller may request. Default does nothing."""

    def scroll_to_result(self) -> None:
        return None


class ApplicationController:
    """
    Owns AppState. One generation request at a time; history is written only
    for the user that was active when the request started.
    """

    def __init__(
        self,
        session_store: SessionStore,
        history_store: HistoryStore,
        generation_client: GenerationClient,
        *,
        launch_params: LaunchParameters | None = None,
        analytics: AnalyticsSink | None = None,
        presenter: Presenter | None = None,
        default_suggestions: Sequence[Suggestion] = (),
        supported_languages: Sequence[str] = (),
        language: str = "English",
        public_url: str = DEFAULT_PUBLIC_URL,
    ) -> None:
        self._session = session_store
        self._history = history_store
        self._generator = generation_client
        self._launch = launch_params or MappingLaunchParameters()
        self._analytics = analytics or NullAnalytics()
        self._presenter = presenter or Presenter()
        self._defaults = list(default_suggestions)
        self._languages = list(supported_languages)
        self._public_url = public_url
        self._pending_shared_topic: str | None = None
        self._bootstrapped = False
        self._generation = 0
        self.state = AppState(language=language)

    @property
    def user(self) -> User | None:
        return self._session.current

    @property
    def history(self) -> list[Anecdote]:
        return self._history.entries

    @property
    def suggestions(self) -> list[Suggestion]:
        return derive_suggestions(self._history.entries, self._defaults)

    @property
    def supported_languages(self) -> list[str]:
        return list(self._languages)

    @property
    def launch_params(self) -> LaunchParameters:
        return self._launch

    # Session

    async def bootstrap(self, shared_topic: str | None = None) -> Anecdote | None:
        """
        Restore the stored session and consume a shared-link topic, taken
        from shared_topic or else the launch parameters.
        A shared topic with no restorable session forces a guest login.
        Runs once per process; later calls only clear the launch parameter.
        """
        if shared_topic:
            self._launch.set(SHARED_TOPIC, shared_topic)
        if self._bootstrapped:
            self._launch.clear(SHARED_TOPIC)
            return None
        self._bootstrapped = True
        shared = (self._launch.get(SHARED_TOPIC) or "").strip()
        if shared:
            self._pending_shared_topic = shared
        else:
            self._launch.clear(SHARED_TOPIC)

        user = self._session.restore()
        if user:
            self._on_user_changed(user)
        elif self._pending_shared_topic:
            self.login_as_guest()
        return await self._consume_shared_topic()

    def login(self, name: str) -> User:
        """Named login. Raises ValidationError on blank name."""
        user = self._session.login(name)
        self._track("login", {"method": "named_user"})
        self._on_user_changed(user)
        return user

    def login_as_guest(self) -> User:
        user = self._session.login_as_guest()
        self._track("login", {"method": "guest"})
        self._on_user_changed(user)
        return user

    def logout(self) -> None:
        self._track("logout")
        self._session.logout()
        self._history.clear()
        self._abandon_generation()
        self.state.current_anecdote = None
        self.state.topic = ""
        self.state.error = None
        self.state.view = View.HOME
        self.state.status = GenerationStatus.IDLE

    def _abandon_generation(self) -> None:
        """Results of any in-flight submit are discarded when it completes."""
        self._generation += 1
        if self.state.is_loading:
            self.state.status = GenerationStatus.IDLE

    def _on_user_changed(self, user: User) -> None:
        self._abandon_generation()
        self._history.load(user)
        self.state.view = View.HOME
        if not self._pending_shared_topic:
            self.state.current_anecdote = None
            self.state.topic = ""

    async def _consume_shared_topic(self) -> Anecdote | None:
        topic = self._pending_shared_topic
        if not topic or not self.user:
            return None
        self._pending_shared_topic = None
        self._launch.clear(SHARED_TOPIC)
        return await self.submit(topic)

    # Generation

    async def submit(self, topic: str | None = None) -> Anecdote | None:
        """
        Generate an anecdote for topic (defaults to the current topic).
        Returns the anecdote, or None when generation failed or another
        request is already in flight.
        """
        selected = self.state.topic if topic is None else topic
        if not selected or not selected.strip():
            raise ValidationError("Please enter a topic.")
        user = self.user
        if user is None:
            raise ValidationError("Log in or continue as a guest first.")
        if self.state.is_loading:
            logger.warning("Ignoring submit for %r: a story is already being generated", selected)
            return None

        language = self.state.language
        self._track("generate_story_start", {"topic": selected, "language": language})
        self.state.status = GenerationStatus.LOADING
        self.state.error = None
        self.state.current_anecdote = None
        self.state.topic = selected
        self.state.view = View.HOME

        generation = self._generation
        try:
            result = await self._generator.generate(selected, language)
        except GenerationError as e:
            self._track("generate_story_error", {"topic": selected, "error_message": str(e)})
            if generation == self._generation:
                self.state.status = GenerationStatus.ERROR
                self.state.error = str(e) or "Something went wrong."
            return None

        if generation != self._generation:
            logger.info("Session changed during generation; %r discarded", result.title)
            return None

        self.state.status = GenerationStatus.IDLE
        self.state.current_anecdote = result
        self._history.append(user, result)
        self._track(
            "generate_story_success",
            {"topic": selected, "language": language, "anecdote_title": result.title},
        )
        self._scroll_to_result()
        return result

    async def select_history_entry(self, index: int) -> Anecdote | None:
        entries = self._history.entries
        if not 0 <= index < len(entries):
            raise ValidationError(f"No history entry at position {index}.")
        entry = entries[index]
        self._track("view_history_item", {"title": entry.title})
        return await self.submit(entry.topic)

    async def select_suggestion(self, label: str) -> Anecdote | None:
        self._track("click_suggestion", {"label": label})
        return await self.submit(label)

    async def select_related_topic(self, label: str) -> Anecdote | None:
        self._track("click_related_topic", {"topic": label})
        return await self.submit(label)

    # View

    def set_language(self, language: str) -> None:
        if self._languages and language not in self._languages:
            raise ValidationError(f"Unsupported language: {language}")
        self.state.language = language
        self._track("change_language", {"language": language})

    def toggle_view(self) -> View:
        self.state.view = View.HISTORY if self.state.view is View.HOME else View.HOME
        self._track("page_view", {"page_path": f"/{self.state.view.value}"})
        return self.state.view

    def go_home(self) -> None:
        self.state.view = View.HOME
        self.state.current_anecdote = None
        self.state.topic = ""
        self._track("page_view", {"page_path": "/home"})

    def explore_new_topic(self) -> None:
        self.state.current_anecdote = None
        self.state.topic = ""
        self._track("explore_new_topic_click")

    def toggle_meanings(self) -> bool:
        self.state.show_meanings = not self.state.show_meanings
        self._track("toggle_meanings", {"state": "on" if self.state.show_meanings else "off"})
        return self.state.show_meanings

    def share(self) -> dict[str, str]:
        """Share link and text for the current anecdote."""
        anecdote = self.state.current_anecdote
        if anecdote is None:
            raise ValidationError("Nothing to share yet.")
        self._track("share_story_click", {"topic": anecdote.topic})
        return {
            "title": anecdote.title,
            "text": f'Check out this story about "{anecdote.title}" on Anecdote!',
            "url": build_share_url(self._public_url, anecdote.topic),
        }

    # Side effects

    def _track(self, event_name: str, params: dict[str, Any] | None = None) -> None:
        try:
            self._analytics.track(event_name, params or {})
        except Exception as e:
            logger.debug("Analytics event %s dropped: %s", event_name, e)

    def _scroll_to_result(self) -> None:
        try:
            self._presenter.scroll_to_result()
        except Exception as e:
            logger.debug("Scroll to result failed: %s", e)


def create_controller(
    *,
    store: KeyValueStore | None = None,
    llm: LLMClient | None = None,
    analytics: AnalyticsSink | None = None,
    launch_params: LaunchParameters | None = None,
    settings: Settings | None = None,
) -> ApplicationController:
    """Factory - wires dependencies from settings."""
    settings = settings or get_settings()
    store = store or create_kv_store(settings)
    llm = llm or OpenAIClient()
    if launch_params is None:
        launch_params = MappingLaunchParameters({SHARED_TOPIC: settings.shared_topic})
    return ApplicationController(
        SessionStore(store),
        HistoryStore(
            store,
            max_entries=settings.history_limit,
            fallback_entries=settings.history_fallback_limit,
        ),
        GenerationClient(llm, temperature=settings.llm_temperature),
        launch_params=launch_params,
        analytics=analytics or create_analytics(settings),
        default_suggestions=default_suggestions(),
        supported_languages=get_catalog().get("supported_languages", []),
        language=settings.default_language,
        public_url=settings.public_url,
    )
