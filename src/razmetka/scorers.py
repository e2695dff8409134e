"""
Reference Classifier Adapters

KeywordScorer is a small bag-of-keywords model for demos and tests;
GracefulAdapter turns any adapter's errors into "no prediction".
"""

import logging
from collections.abc import Hashable, Iterable, Mapping
from typing import Any, Optional

import numpy as np

from .adapter import ClassifierAdapter, Prediction
from .errors import ConfigurationError
from .tokens import tokenize

logger = logging.getLogger(__name__)


class KeywordScorer:
    """
    Scores labels by keyword hits.

    Hit counts per label are turned into a distribution with a softmax
    (``temperature`` scales the counts); the arg-max label is returned with
    its probability. Sentences without any keyword get no prediction.
    Keywords match word forms by case-folded prefix, so "факт" also
    matches "фактом".
    """

    def __init__(self, keywords: Mapping[Hashable, Iterable[str]], temperature: float = 1.0):
        if not keywords:
            raise ConfigurationError("KeywordScorer needs at least one label")
        if temperature <= 0:
            raise ConfigurationError(f"temperature must be positive, got {temperature}")
        self.labels: list[Hashable] = list(keywords)
        self.keywords: list[tuple[str, ...]] = []
        for label in self.labels:
            stems = keywords[label]
            if isinstance(stems, str) or not isinstance(stems, (list, tuple)):
                raise ConfigurationError(
                    f"Keywords for label {label!r} must be a list of strings, got {stems!r}"
                )
            if not all(isinstance(s, str) and s.strip() for s in stems):
                raise ConfigurationError(
                    f"Keywords for label {label!r} must be non-empty strings, got {stems!r}"
                )
            self.keywords.append(tuple(s.strip().lower() for s in stems))
        self.temperature = float(temperature)

    def hits(self, text: str) -> np.ndarray:
        words = [t.lemma for t in tokenize(text)]
        counts = np.zeros(len(self.labels), dtype=float)
        for idx, stems in enumerate(self.keywords):
            counts[idx] = sum(1 for word in words for stem in stems if word.startswith(stem))
        return counts

    def score(self, text: str, options: Mapping[str, Any]) -> Optional[Prediction]:
        counts = self.hits(text)
        if not counts.any():
            return None
        logits = counts / self.temperature
        probs = np.exp(logits - logits.max())
        probs /= probs.sum()
        best = int(np.argmax(probs))
        return self.labels[best], float(probs[best])

    def __repr__(self) -> str:
        return f"KeywordScorer(labels={self.labels!r}, temperature={self.temperature})"


class GracefulAdapter:
    """Wraps an adapter so that its exceptions become None (default label, low confidence)."""

    def __init__(self, inner: ClassifierAdapter):
        self.inner = inner

    def score(self, text: str, options: Mapping[str, Any]) -> Optional[Prediction]:
        try:
            return self.inner.score(text, options)
        except Exception:
            logger.exception("Classifier %r failed; falling back to default", self.inner)
            return None

    def __repr__(self) -> str:
        return f"GracefulAdapter({self.inner!r})"
