"""Review classifier port — abstract interface for text-moderation services.

The moderator programs against the port; adapters are swapped via the
``REVIEW_CLASSIFIER`` environment variable.
"""

from abc import ABC, abstractmethod


class ReviewClassifier(ABC):
    """Abstract interface for classifier adapters."""

    @abstractmethod
    def classify(self, text: str, instruction: str) -> str:
        """Classify ``text`` following the system ``instruction``.

        Returns:
            The raw classifier answer. Interpretation is the moderator's job.

        Raises:
            ExternalServiceError: when the service cannot be reached or errors.
        """
        ...
