"""
Shared pytest fixtures for test suite.
"""

import pytest

from razmetka.matchers import any_token, gram, lemma, token_all
from razmetka.registry import PredicateRegistry
from razmetka.tokens import LexiconTagger, Token

DEMAND_VERBS = ["требовать", "просить", "взыскать", "обязать", "вернуть"]

LEGAL_LEXICON = {
    "истец": {"lemma": "истец", "tags": ["NOUN", "nomn"]},
    "требует": {"lemma": "требовать", "tags": ["VERB", "sing", "3per"]},
    "требуем": {"lemma": "требовать", "tags": ["VERB", "plur", "1per"]},
    "требование": {"lemma": "требование", "tags": ["NOUN", "nomn"]},
    "соответствии": {"lemma": "соответствие", "tags": ["NOUN", "loct"]},
    "подтверждается": {"lemma": "подтверждаться", "tags": ["VERB", "sing", "3per"]},
    "актом": {"lemma": "акт", "tags": ["NOUN", "ablt"]},
    "вынуждены": {"lemma": "вынудить", "tags": ["PRTS", "plur"]},
    "суд": {"lemma": "суд", "tags": ["NOUN", "accs"]},
    "привет": {"lemma": "привет", "tags": ["INTJ"]},
}


class StubClassifier:
    """Fake adapter keyed on substrings; records every call."""

    def __init__(self):
        self.calls = []

    def score(self, text, options):
        self.calls.append((text, dict(options)))
        if "факт" in text:
            return ("fact", 0.85)
        if "квалификация" in text:
            return ("qualification", 0.60)
        return ("fact", 0.20)


class FixedClassifier:
    """Fake adapter that always returns the same prediction."""

    def __init__(self, prediction):
        self.prediction = prediction
        self.calls = 0

    def score(self, text, options):
        self.calls += 1
        return self.prediction


def make_tokens(*rows):
    """Builds tokens from ``(text, lemma, tags)`` tuples; tags as a comma string."""
    return [Token.from_row(*row) for row in rows]


@pytest.fixture
def tokens_factory():
    return make_tokens


@pytest.fixture
def flag_registry():
    """
    Registry whose predicates read boolean flags from a dict.

    Tests flip ``flags[name]`` and inspect ``calls`` to see evaluation order.
    """
    flags = {}
    calls = []
    registry = PredicateRegistry()

    def make(name):
        def predicate(tokens):
            calls.append(name)
            return flags.get(name, False)

        return predicate

    for name in ["a", "b", "c", "title_base", "pretrial", "short"]:
        registry.register_predicate(name, make(name))
    registry.flags = flags
    registry.calls = calls
    return registry


@pytest.fixture
def legal_registry():
    registry = PredicateRegistry()
    demand_verb = any_token(token_all(lemma(DEMAND_VERBS), gram("VERB")))
    registry.register_predicate("demand_verb", demand_verb)
    return registry


@pytest.fixture
def legal_tagger():
    return LexiconTagger(LEGAL_LEXICON)


@pytest.fixture
def stub_classifier():
    return StubClassifier()


@pytest.fixture
def isolated_logging(tmp_path, monkeypatch):
    """
    Points LOG_DIR at a temp dir and restores root/audit handlers afterwards.
    """
    import logging

    from razmetka import logging_config

    log_dir = tmp_path / "logs"
    monkeypatch.setattr(logging_config, "LOG_DIR", log_dir)
    monkeypatch.setenv("RAZMETKA_NO_COLOR", "1")

    root = logging.getLogger()
    audit = logging.getLogger("razmetka.audit")
    saved = (list(root.handlers), root.level, list(audit.handlers), audit.propagate)
    yield log_dir

    for logger in (root, audit):
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            if handler not in saved[0] and handler not in saved[2]:
                handler.close()
    root_handlers, root_level, audit_handlers, audit_propagate = saved
    for handler in root_handlers:
        root.addHandler(handler)
    root.setLevel(root_level)
    for handler in audit_handlers:
        audit.addHandler(handler)
    audit.propagate = audit_propagate
