"""
Predicate Registry

Two name-keyed lookup tables: token predicates ``fn(tokens) -> bool`` for
``Predicate`` nodes and text predicates ``fn(tokens, text) -> bool`` for
``CustomFn`` nodes. The tables are independent, so the same name may appear
in both without ambiguity.
"""

from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Optional

from .errors import ConfigurationError, UnknownPredicate
from .tokens import Token

TokenPredicate = Callable[[Sequence[Token]], bool]
TextPredicate = Callable[[Sequence[Token], str], bool]


class PredicateRegistry:
    """Registry of named predicates. Read-only once frozen."""

    def __init__(
        self,
        predicates: Optional[Mapping[str, TokenPredicate]] = None,
        customs: Optional[Mapping[str, TextPredicate]] = None,
    ):
        self._predicates: dict[str, TokenPredicate] = {}
        self._customs: dict[str, TextPredicate] = {}
        self._frozen = False
        for name, fn in (predicates or {}).items():
            self.register_predicate(name, fn)
        for name, fn in (customs or {}).items():
            self.register_custom(name, fn)

    def _add(self, table: dict[str, Any], kind: str, name: str, fn: Any) -> None:
        if self._frozen:
            raise ConfigurationError(f"Cannot register {kind} '{name}': registry is frozen")
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"{kind.capitalize()} name must be a non-empty string")
        if not callable(fn):
            raise ConfigurationError(f"{kind.capitalize()} '{name}' is not callable")
        if name in table:
            raise ConfigurationError(f"Duplicate {kind} '{name}'")
        table[name] = fn

    def register_predicate(self, name: str, fn: TokenPredicate) -> TokenPredicate:
        self._add(self._predicates, "predicate", name, fn)
        return fn

    def register_custom(self, name: str, fn: TextPredicate) -> TextPredicate:
        self._add(self._customs, "custom", name, fn)
        return fn

    def predicate(self, name: str) -> Any:
        """Decorator to register a token predicate."""

        def decorator(fn: TokenPredicate) -> TokenPredicate:
            return self.register_predicate(name, fn)

        return decorator

    def custom(self, name: str) -> Any:
        """Decorator to register a text predicate."""

        def decorator(fn: TextPredicate) -> TextPredicate:
            return self.register_custom(name, fn)

        return decorator

    def token_predicate(self, name: str) -> TokenPredicate:
        try:
            return self._predicates[name]
        except KeyError:
            raise UnknownPredicate(name, "predicate") from None

    def text_predicate(self, name: str) -> TextPredicate:
        try:
            return self._customs[name]
        except KeyError:
            raise UnknownPredicate(name, "custom") from None

    def has_predicate(self, name: str) -> bool:
        return name in self._predicates

    def has_custom(self, name: str) -> bool:
        return name in self._customs

    def freeze(self) -> "PredicateRegistry":
        """Stops further registration. Returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def predicates(self) -> Mapping[str, TokenPredicate]:
        return MappingProxyType(self._predicates)

    @property
    def customs(self) -> Mapping[str, TextPredicate]:
        return MappingProxyType(self._customs)

    def __repr__(self) -> str:
        return (
            f"PredicateRegistry(predicates={sorted(self._predicates)}, "
            f"customs={sorted(self._customs)}, frozen={self._frozen})"
        )
