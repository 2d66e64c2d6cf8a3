"""Review classifier abstraction — pluggable text-moderation integration."""

import os

_classifier_instance = None


def get_classifier():
    """Return the configured classifier adapter (singleton).

    Uses FakeClassifier by default. In production, set REVIEW_CLASSIFIER
    to ``anthropic``.
    """
    global _classifier_instance
    if _classifier_instance is None:
        adapter = os.environ.get("REVIEW_CLASSIFIER", "fake")
        if adapter == "fake":
            from storefront.moderation.fake_adapter import FakeClassifier

            _classifier_instance = FakeClassifier()
        elif adapter == "anthropic":
            from storefront.moderation.anthropic_adapter import AnthropicClassifier

            _classifier_instance = AnthropicClassifier()
        else:
            raise ValueError(f"Unknown review classifier: {adapter}")
    return _classifier_instance


def set_classifier(classifier):
    global _classifier_instance
    _classifier_instance = classifier


def reset_classifier():
    """Reset the classifier singleton (useful for testing)."""
    global _classifier_instance
    _classifier_instance = None
