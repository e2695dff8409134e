"""
Condition Evaluator

Interprets a condition tree against a token sequence and its source text.
"""

from collections.abc import Sequence

from .conditions import AllOf, AnyOf, Condition, CustomFn, Not, Predicate
from .errors import MalformedCondition
from .registry import PredicateRegistry
from .tokens import Token


def evaluate(
    condition: Condition,
    tokens: Sequence[Token],
    text: str,
    registry: PredicateRegistry,
) -> bool:
    """
    Evaluates ``condition``. ``AllOf`` and ``AnyOf`` short-circuit left to right.

    Raises:
        UnknownPredicate: a referenced name is not registered
        MalformedCondition: a node is not a condition
    """
    if isinstance(condition, Predicate):
        return bool(registry.token_predicate(condition.name)(tokens))

    if isinstance(condition, CustomFn):
        return bool(registry.text_predicate(condition.name)(tokens, text))

    if isinstance(condition, AllOf):
        for child in condition.conditions:
            if not evaluate(child, tokens, text, registry):
                return False
        return True

    if isinstance(condition, AnyOf):
        for child in condition.conditions:
            if evaluate(child, tokens, text, registry):
                return True
        return False

    if isinstance(condition, Not):
        return not evaluate(condition.condition, tokens, text, registry)

    raise MalformedCondition(f"Not a condition: {type(condition).__name__}")
