"""
Matcher Builders

Bag-of-features helpers for writing token predicates. Token tests
(``lemma``, ``gram``, ``caseless``, ``token_all``, ``token_any``) look at one
token; sequence tests (``any_token``, ``all_of``, ``any_of``) look at the
whole sentence and are what gets registered in a PredicateRegistry.

    demand = any_token(token_all(lemma(["требовать", "просить"]), gram("VERB")))
    registry.register_predicate("demand", demand)
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Union

from .errors import ConfigurationError
from .tokens import Token

TokenTest = Callable[[Token], bool]
SequenceTest = Callable[[Sequence[Token]], bool]


def _words(values: Union[str, Iterable[str]]) -> frozenset[str]:
    if isinstance(values, str):
        values = values.split()
    return frozenset(v.lower() for v in values)


def lemma(values: Union[str, Iterable[str]]) -> TokenTest:
    """Token lemma is one of ``values`` (a word list or a space-separated string)."""
    lemmas = _words(values)
    return lambda token: token.lemma in lemmas


def caseless(values: Union[str, Iterable[str]]) -> TokenTest:
    """Token surface form, case-folded, is one of ``values``."""
    forms = _words(values)
    return lambda token: token.text.lower() in forms


def gram(tag: Union[str, Iterable[str]]) -> TokenTest:
    """Token carries grammeme ``tag`` (e.g. ``VERB``), or every grammeme of a list."""
    tags = frozenset([tag]) if isinstance(tag, str) else frozenset(tag)
    return lambda token: tags <= token.tags


def token_all(*tests: TokenTest) -> TokenTest:
    return lambda token: all(test(token) for test in tests)


def token_any(*tests: TokenTest) -> TokenTest:
    return lambda token: any(test(token) for test in tests)


def any_token(test: TokenTest) -> SequenceTest:
    """Some token in the sentence passes ``test``."""
    return lambda tokens: any(test(token) for token in tokens)


def all_of(*tests: SequenceTest) -> SequenceTest:
    """Every sequence test passes."""
    return lambda tokens: all(test(tokens) for test in tests)


def any_of(*tests: SequenceTest) -> SequenceTest:
    """At least one sequence test passes."""
    return lambda tokens: any(test(tokens) for test in tests)


TOKEN_TEST_BUILDERS: dict[str, Callable[[Any], TokenTest]] = {
    "lemma": lemma,
    "caseless": caseless,
    "gram": gram,
}


def from_spec(name: str, spec: Mapping[str, Any]) -> SequenceTest:
    """
    Builds an ``any_token`` matcher from a config entry.

    ``{"lemma": [...], "gram": "VERB"}`` matches a sentence containing a token
    that satisfies every listed feature.
    """
    if not isinstance(spec, Mapping) or not spec:
        raise ConfigurationError(f"Matcher '{name}' must be a non-empty object")
    tests = []
    for key, value in spec.items():
        builder = TOKEN_TEST_BUILDERS.get(key)
        if builder is None:
            available = ", ".join(sorted(TOKEN_TEST_BUILDERS))
            raise ConfigurationError(
                f"Matcher '{name}' has unknown feature '{key}'. Available: {available}"
            )
        if not _is_word_list(value):
            raise ConfigurationError(
                f"Matcher '{name}' feature '{key}' must be a string or a list of strings, "
                f"got {value!r}"
            )
        tests.append(builder(value))
    return any_token(token_all(*tests))


def _is_word_list(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(v, str) and v.strip() for v in value)
    )
