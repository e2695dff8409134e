"""
Rule Table

Holds the ordered (label, condition) priority list. Order is dispatch
priority: the first satisfied rule wins, so declare the most specific
rules first.
"""

from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Optional

from .conditions import Condition, Predicate, referenced_names, validate_condition
from .errors import MalformedCondition, UnknownPredicate
from .registry import PredicateRegistry


@dataclass(frozen=True)
class Rule:
    """A label paired with the condition that selects it."""

    label: Hashable
    condition: Condition


class RuleTable:
    """Immutable, validated, ordered sequence of rules."""

    def __init__(self, rules: Iterable[Any] = (), registry: Optional[PredicateRegistry] = None):
        self._rules: tuple[Rule, ...] = tuple(
            self._coerce(entry, idx) for idx, entry in enumerate(rules)
        )
        if registry is not None:
            self.check_names(registry)

    @staticmethod
    def _coerce(entry: Any, idx: int) -> Rule:
        path = f"rules[{idx}]"
        if isinstance(entry, Rule):
            rule = entry
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            rule = Rule(label=entry[0], condition=entry[1])
        else:
            raise MalformedCondition(
                f"Expected a Rule or (label, condition) pair, got {type(entry).__name__}",
                path=path,
            )
        validate_condition(rule.condition, path=f"{path}.condition")
        return rule

    @classmethod
    def from_priority(
        cls, entries: Iterable[Any], registry: Optional[PredicateRegistry] = None
    ) -> "RuleTable":
        """
        Builds a table from ``(label, condition_or_name)`` pairs or Rule objects.

        A bare string stands for ``Predicate(name)``.
        """
        rules = []
        for idx, entry in enumerate(entries):
            if isinstance(entry, Rule):
                rules.append(entry)
                continue
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise MalformedCondition(
                    f"Expected a (label, condition) pair, got {entry!r}", path=f"priority[{idx}]"
                )
            label, condition = entry
            if isinstance(condition, str):
                condition = Predicate(condition)
            rules.append(Rule(label=label, condition=condition))
        return cls(rules, registry=registry)

    def check_names(self, registry: PredicateRegistry) -> None:
        """Raises UnknownPredicate for the first name the registry lacks."""
        for rule in self._rules:
            predicates, customs = referenced_names(rule.condition)
            for name in sorted(predicates):
                if not registry.has_predicate(name):
                    raise UnknownPredicate(name, "predicate")
            for name in sorted(customs):
                if not registry.has_custom(name):
                    raise UnknownPredicate(name, "custom")

    @property
    def labels(self) -> list[Hashable]:
        return [rule.label for rule in self._rules]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, idx: int) -> Rule:
        return self._rules[idx]

    def __repr__(self) -> str:
        return f"RuleTable({self.labels!r})"
