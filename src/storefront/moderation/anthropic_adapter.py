"""Anthropic review classifier — production moderation through the Messages API."""

import os

import structlog

from storefront.exceptions import ExternalServiceError
from storefront.moderation.port import ReviewClassifier

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-latest"


class AnthropicClassifier(ReviewClassifier):
    """Asks a Claude model for a one-word verdict.

    The client is created on first use, so importing this module does not
    require credentials.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float = 10.0,
        max_tokens: int = 5,
    ):
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model or os.environ.get("REVIEW_CLASSIFIER_MODEL", DEFAULT_MODEL)
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._client = None

    def _get_client(self):
        if self._client is None:
            if not self._api_key:
                raise ExternalServiceError("ANTHROPIC_API_KEY is not set", service="anthropic")

            import anthropic

            self._client = anthropic.Anthropic(api_key=self._api_key, timeout=self.timeout)
        return self._client

    def classify(self, text: str, instruction: str) -> str:
        import anthropic

        client = self._get_client()
        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=instruction,
                messages=[{"role": "user", "content": text}],
            )
        except anthropic.APIError as exc:
            logger.error("Review classification failed", model=self.model, error=str(exc))
            raise ExternalServiceError("Review moderation service failed", service="anthropic") from exc

        return "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
