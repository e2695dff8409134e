"""
Dispatcher

Runs the rule table in priority order and, when no rule fires, hands the
sentence to the external classifier adapter under a confidence threshold.
"""

import logging
import numbers
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .adapter import ClassifierAdapter
from .errors import AdapterFailure, ConfigurationError
from .evaluator import evaluate
from .registry import PredicateRegistry
from .rules import RuleTable
from .tokens import Token, TokenSource, tokenize

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "unknown"
DEFAULT_THRESHOLD = 0.40


class Confidence(str, Enum):
    """How the label was chosen."""

    GRAMMAR = "grammar"
    CLASSIFIER = "classifier"
    LOW = "low"


@dataclass(frozen=True)
class ClassifierConfig:
    """Fallback policy applied when no rule matches."""

    classifier: Optional[ClassifierAdapter] = None
    default: Hashable = DEFAULT_LABEL
    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        threshold = self.threshold
        if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
            raise ConfigurationError(f"threshold must be a number, got {threshold!r}")
        if not 0.0 <= float(threshold) <= 1.0:
            raise ConfigurationError(f"threshold must be within [0, 1], got {threshold}")
        if self.classifier is not None and not callable(getattr(self.classifier, "score", None)):
            raise ConfigurationError(
                f"classifier {self.classifier!r} does not implement score(text, options)"
            )


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of a single classification call."""

    label: Hashable
    confidence: Confidence
    score: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label, "confidence": self.confidence.value}
        if self.score is not None:
            payload["score"] = self.score
        return payload


def _call_adapter(adapter: ClassifierAdapter, text: str) -> Optional[tuple[Hashable, float]]:
    try:
        prediction = adapter.score(text, {})
    except Exception as exc:
        raise AdapterFailure(adapter, f"Classifier raised {type(exc).__name__}: {exc}") from exc

    if prediction is None:
        return None
    if not isinstance(prediction, (tuple, list)) or len(prediction) != 2:
        raise AdapterFailure(adapter, f"Expected (label, score) or None, got {prediction!r}")

    label, score = prediction
    if isinstance(score, bool) or not isinstance(score, numbers.Real):
        raise AdapterFailure(adapter, f"Score must be a number, got {score!r}")
    score = float(score)
    if not 0.0 <= score <= 1.0:
        logger.warning("Classifier score %s for label %r is outside [0, 1]", score, label)
    return label, score


def classify(
    tokens: Sequence[Token],
    text: str,
    rules: RuleTable,
    classifier_config: ClassifierConfig,
    registry: PredicateRegistry,
) -> ClassificationResult:
    """
    Classifies a tokenized sentence. First matching rule wins.

    Falls back to the adapter (if any), then to the default label.
    UnknownPredicate and AdapterFailure propagate to the caller.
    """
    for rule in rules:
        if evaluate(rule.condition, tokens, text, registry):
            logger.debug("Rule matched: label=%r", rule.label)
            return ClassificationResult(rule.label, Confidence.GRAMMAR)

    config = classifier_config
    if config.classifier is None:
        logger.debug("No rule matched, no classifier: default=%r", config.default)
        return ClassificationResult(config.default, Confidence.LOW)

    prediction = _call_adapter(config.classifier, text)
    if prediction is None:
        logger.debug("Classifier abstained: default=%r", config.default)
        return ClassificationResult(config.default, Confidence.LOW)

    label, score = prediction
    if score >= config.threshold:
        logger.debug("Classifier accepted: label=%r score=%.3f", label, score)
        return ClassificationResult(label, Confidence.CLASSIFIER, score)

    logger.debug(
        "Classifier below threshold: label=%r score=%.3f threshold=%.2f default=%r",
        label,
        score,
        config.threshold,
        config.default,
    )
    return ClassificationResult(config.default, Confidence.LOW, score)


class Dispatcher:
    """
    Bundles a registry, rule table and fallback policy into a reusable classifier.

    All state is fixed at construction, so one instance may serve concurrent callers.
    """

    def __init__(
        self,
        rules: Union[RuleTable, Iterable[Any]],
        config: Optional[ClassifierConfig] = None,
        registry: Optional[PredicateRegistry] = None,
        *,
        token_source: Optional[TokenSource] = None,
    ):
        self.registry = (registry or PredicateRegistry()).freeze()
        if isinstance(rules, RuleTable):
            rules.check_names(self.registry)
            self.rules = rules
        else:
            self.rules = RuleTable.from_priority(rules, registry=self.registry)
        self.config = config or ClassifierConfig()
        self.token_source: TokenSource = token_source or tokenize

    def classify(self, tokens: Sequence[Token], text: str = "") -> ClassificationResult:
        """Classifies pre-tokenized input."""
        return classify(tokens, text, self.rules, self.config, self.registry)

    def classify_text(self, text: str) -> ClassificationResult:
        """Tokenizes ``text`` once and classifies it."""
        tokens = self.token_source(text)
        return classify(tokens, text, self.rules, self.config, self.registry)

    def __repr__(self) -> str:
        return (
            f"Dispatcher(rules={self.rules.labels!r}, default={self.config.default!r}, "
            f"threshold={self.config.threshold}, classifier={self.config.classifier!r})"
        )
