"""
Unit tests for matcher builders.
"""

import pytest

from conftest import make_tokens
from razmetka.errors import ConfigurationError
from razmetka.matchers import (
    all_of,
    any_of,
    any_token,
    caseless,
    from_spec,
    gram,
    lemma,
    token_all,
    token_any,
)

SENTENCE = make_tokens(
    ("Оплата", "оплата", "NOUN,nomn"),
    ("подтверждается", "подтверждаться", "VERB,sing,3per"),
    ("актом", "акт", "NOUN,ablt"),
    ("Суда", "суд", "NOUN,gent"),
)


def test_token_tests():
    verb = SENTENCE[1]
    assert lemma("подтверждаться подтвердить")(verb)
    assert lemma(["Подтверждаться"])(verb)
    assert gram("VERB")(verb)
    assert gram(["VERB", "sing"])(verb)
    assert not gram(["VERB", "plur"])(verb)
    assert caseless("ПОДТВЕРЖДАЕТСЯ")(verb)
    assert token_all(lemma("подтверждаться"), gram("VERB"))(verb)
    assert not token_all(lemma("подтверждаться"), gram("NOUN"))(verb)
    assert token_any(lemma("акт"), gram("VERB"))(verb)


def test_any_token_requires_features_on_the_same_token():
    verb_noun = any_token(token_all(lemma("акт"), gram("VERB")))
    assert not verb_noun(SENTENCE)
    assert any_token(token_all(lemma("акт"), gram("NOUN")))(SENTENCE)


def test_sequence_combinators():
    confirm = any_token(lemma("подтверждаться"))
    document = any_token(lemma("акт квитанция"))
    missing = any_token(lemma("вынудить"))
    assert all_of(confirm, document)(SENTENCE)
    assert not all_of(confirm, missing)(SENTENCE)
    assert any_of(missing, document)(SENTENCE)
    assert not any_token(lemma("акт"))([])


def test_caseless_matches_surface_form_not_lemma():
    assert any_token(caseless("суда"))(SENTENCE)
    assert not any_token(caseless("суд"))(SENTENCE)


def test_from_spec_builds_any_token_matcher():
    matcher = from_spec("evidence_verb", {"lemma": ["подтверждаться"], "gram": "VERB"})
    assert matcher(SENTENCE)
    assert not from_spec("x", {"lemma": ["акт"], "gram": "VERB"})(SENTENCE)


@pytest.mark.parametrize(
    "spec",
    [
        {},
        [],
        {"stem": "акт"},
        {"gram": 5},
        {"lemma": 5},
        {"lemma": []},
        {"caseless": ["суд", None]},
        {"lemma": "  "},
    ],
)
def test_from_spec_rejects_bad_specs(spec):
    with pytest.raises(ConfigurationError):
        from_spec("bad", spec)


def test_from_spec_accepts_word_string_and_tag_list():
    matcher = from_spec("evidence_verb", {"lemma": "подтверждаться акт", "gram": ["VERB"]})
    assert matcher(SENTENCE)
