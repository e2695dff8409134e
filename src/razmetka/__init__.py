"""
Razmetka Sentence Classifier

Priority-dispatch rules over tagged tokens with a pluggable scoring fallback.
"""

from .adapter import ClassifierAdapter
from .conditions import AllOf, AnyOf, Condition, CustomFn, Not, Predicate
from .dispatcher import (
    ClassificationResult,
    ClassifierConfig,
    Confidence,
    Dispatcher,
    classify,
)
from .errors import (
    AdapterFailure,
    ConfigurationError,
    MalformedCondition,
    RazmetkaError,
    UnknownPredicate,
)
from .evaluator import evaluate
from .registry import PredicateRegistry
from .rules import Rule, RuleTable
from .tokens import LexiconTagger, Token, TokenSource, tokenize

__version__ = "0.1.0"

__all__ = [
    "AdapterFailure",
    "AllOf",
    "AnyOf",
    "ClassificationResult",
    "ClassifierAdapter",
    "ClassifierConfig",
    "Condition",
    "Confidence",
    "ConfigurationError",
    "CustomFn",
    "Dispatcher",
    "LexiconTagger",
    "MalformedCondition",
    "Not",
    "Predicate",
    "PredicateRegistry",
    "RazmetkaError",
    "Rule",
    "RuleTable",
    "Token",
    "TokenSource",
    "UnknownPredicate",
    "classify",
    "evaluate",
    "tokenize",
]
