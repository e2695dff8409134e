from collections.abc import Hashable, Mapping
from typing import Any, Optional, Protocol

Prediction = tuple[Hashable, float]


class ClassifierAdapter(Protocol):
    """
    Interface for external scoring classifiers.
    Decouples the dispatcher from specific models (fastText, embeddings, LLMs).
    """

    def score(self, text: str, options: Mapping[str, Any]) -> Optional[Prediction]:
        """
        Score a single sentence.

        Args:
            text: Raw sentence text
            options: Adapter-specific options (the dispatcher passes an empty mapping)

        Returns:
            (label, score) with score expected in [0.0, 1.0], or None for no prediction.
            Implementations that want graceful degradation must turn their own
            errors into None instead of raising.
        """
        ...
