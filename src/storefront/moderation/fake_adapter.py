"""Fake review classifier — deterministic verdicts for testing and development.

Answers "SAFE" by default. Tests can pin the verdict, flag specific words,
or make every call fail.
"""

from storefront.exceptions import ExternalServiceError
from storefront.moderation.port import ReviewClassifier


class FakeClassifier(ReviewClassifier):
    def __init__(self):
        self.verdict = "SAFE"
        self.should_fail = False
        self.failure_reason = "Classifier unavailable"
        self.blocked_words: set[str] = set()
        self.calls: list[str] = []

    def configure(
        self,
        verdict: str = "SAFE",
        should_fail: bool = False,
        failure_reason: str = "Classifier unavailable",
        blocked_words=None,
    ):
        """Configure the fake classifier behavior for testing."""
        self.verdict = verdict
        self.should_fail = should_fail
        self.failure_reason = failure_reason
        self.blocked_words = {word.lower() for word in (blocked_words or ())}

    def classify(self, text: str, instruction: str) -> str:
        self.calls.append(text)
        if self.should_fail:
            raise ExternalServiceError(self.failure_reason, service="fake-classifier")

        lowered = text.lower()
        if any(word in lowered for word in self.blocked_words):
            return "UNSAFE"
        return self.verdict
