"""Review moderator — a binary SAFE/UNSAFE gate in front of review writes."""

import structlog

from storefront.exceptions import ExternalServiceError
from storefront.moderation import get_classifier

logger = structlog.get_logger(__name__)

MODERATION_INSTRUCTION = (
    "You are a content moderator for a wand shop. Classify the customer "
    "review you are given. Reply with exactly one word: SAFE if the review "
    "is acceptable to publish, UNSAFE if it contains abusive, hateful, "
    "sexual or violent content. Do not add anything else."
)


class ReviewModerator:
    def __init__(self, classifier=None):
        self._classifier = classifier

    @property
    def classifier(self):
        return self._classifier or get_classifier()

    def is_safe(self, text: str) -> bool:
        """True for SAFE, False for UNSAFE; anything else fails closed."""
        try:
            answer = self.classifier.classify(text, MODERATION_INSTRUCTION)
        except ExternalServiceError:
            raise
        except Exception as exc:
            logger.error("Review classifier raised", error=str(exc))
            raise ExternalServiceError("Review moderation service failed") from exc

        verdict = (answer or "").strip().upper()

        if verdict == "SAFE":
            return True
        if verdict == "UNSAFE":
            return False

        logger.warning("Unexpected moderation verdict", verdict=answer)
        raise ExternalServiceError(
            "Review moderation returned an unusable answer",
            verdict=answer,
        )
