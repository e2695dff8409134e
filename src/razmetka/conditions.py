"""
Condition Model

Immutable boolean condition trees built from predicate references and the
AND / OR / NOT combinators.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from .errors import MalformedCondition


def _check_name(node: str, name: Any) -> None:
    if not isinstance(name, str) or not name.strip():
        raise MalformedCondition(f"{node} expects a non-empty predicate name, got {name!r}")


def _check_children(node: str, conditions: Any) -> tuple["Condition", ...]:
    if not isinstance(conditions, (list, tuple)):
        raise MalformedCondition(
            f"{node} expects a list of conditions, got {type(conditions).__name__}"
        )
    for idx, child in enumerate(conditions):
        if not isinstance(child, CONDITION_TYPES):
            raise MalformedCondition(
                f"{node} child at index {idx} is {type(child).__name__}, not a condition"
            )
    return tuple(conditions)


@dataclass(frozen=True)
class Predicate:
    """Reference to a token predicate, called as ``fn(tokens)``."""

    name: str

    def __post_init__(self) -> None:
        _check_name("Predicate", self.name)


@dataclass(frozen=True)
class CustomFn:
    """Reference to a text predicate, called as ``fn(tokens, text)``."""

    name: str

    def __post_init__(self) -> None:
        _check_name("CustomFn", self.name)


@dataclass(frozen=True)
class AllOf:
    """Logical AND. Empty is vacuously true."""

    conditions: tuple["Condition", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", _check_children("AllOf", self.conditions))


@dataclass(frozen=True)
class AnyOf:
    """Logical OR. Empty is vacuously false."""

    conditions: tuple["Condition", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", _check_children("AnyOf", self.conditions))


@dataclass(frozen=True)
class Not:
    """Logical negation."""

    condition: "Condition"

    def __post_init__(self) -> None:
        if not isinstance(self.condition, CONDITION_TYPES):
            raise MalformedCondition(
                f"Not expects a condition, got {type(self.condition).__name__}"
            )


Condition = Union[Predicate, CustomFn, AllOf, AnyOf, Not]
CONDITION_TYPES = (Predicate, CustomFn, AllOf, AnyOf, Not)


def walk(condition: Condition) -> Iterator[Condition]:
    """Yields every node of the tree, depth first, parents before children."""
    yield condition
    if isinstance(condition, (AllOf, AnyOf)):
        for child in condition.conditions:
            yield from walk(child)
    elif isinstance(condition, Not):
        yield from walk(condition.condition)


def referenced_names(condition: Condition) -> tuple[set[str], set[str]]:
    """Returns ``(predicate_names, custom_names)`` referenced by the tree."""
    predicates: set[str] = set()
    customs: set[str] = set()
    for node in walk(condition):
        if isinstance(node, Predicate):
            predicates.add(node.name)
        elif isinstance(node, CustomFn):
            customs.add(node.name)
    return predicates, customs


def validate_condition(condition: Any, *, path: str = "condition") -> Condition:
    """
    Checks that ``condition`` is a well-formed tree.

    The dataclass constructors already validate their own payload; this
    catches trees assembled by hand (e.g. via ``object.__setattr__``) and
    values that are not conditions at all.
    """
    if isinstance(condition, (Predicate, CustomFn)):
        if not isinstance(condition.name, str) or not condition.name.strip():
            raise MalformedCondition("Empty predicate name", path=path)
        return condition
    if isinstance(condition, (AllOf, AnyOf)):
        if not isinstance(condition.conditions, tuple):
            raise MalformedCondition(
                f"{type(condition).__name__} payload must be a list of conditions", path=path
            )
        for idx, child in enumerate(condition.conditions):
            validate_condition(child, path=f"{path}[{idx}]")
        return condition
    if isinstance(condition, Not):
        validate_condition(condition.condition, path=f"{path}.not")
        return condition
    raise MalformedCondition(f"Not a condition: {type(condition).__name__}", path=path)
