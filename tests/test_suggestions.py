import pytest

from anecdote.models import Anecdote, SubjectCategory, Suggestion
from anecdote.services.suggestions import default_suggestions, derive_suggestions


@pytest.fixture
def defaults():
    return default_suggestions()


@pytest.fixture
def entries(make_payload):
    def _entries(*topics: str) -> list[Anecdote]:
        return [
            Anecdote.model_validate(make_payload(title=f"Story {i}", topic=t))
            for i, t in enumerate(topics)
        ]

    return _entries


def test_catalog_defaults_loaded(defaults):
    assert [s.label for s in defaults] == [
        "Newton's Apple",
        "Pythagoras",
        "The Trojan Horse",
        "Shakespeare",
        "Discovery of Penicillin",
        "Leonardo da Vinci",
    ]
    assert defaults[1].category is SubjectCategory.MATH


def test_empty_history_returns_defaults(defaults):
    assert derive_suggestions([], defaults) == defaults


def test_history_topics_come_first_deduplicated(defaults, entries):
    result = derive_suggestions(entries("Physics", "Physics", "History", "Math", "Art"), defaults)

    assert [s.label for s in result[:3]] == ["Physics", "History", "Math"]
    assert all(s.category is SubjectCategory.GENERAL for s in result[:3])
    assert len(result) == 6


def test_defaults_already_in_history_are_dropped(defaults, entries):
    result = derive_suggestions(entries("Pythagoras"), defaults)

    labels = [s.label for s in result]
    assert labels.count("Pythagoras") == 1
    assert labels == [
        "Pythagoras",
        "Newton's Apple",
        "The Trojan Horse",
        "Shakespeare",
        "Discovery of Penicillin",
        "Leonardo da Vinci",
    ]


def test_short_default_list_is_not_padded(entries):
    result = derive_suggestions(entries("Physics"), [Suggestion(label="Shakespeare")])

    assert [s.label for s in result] == ["Physics", "Shakespeare"]
