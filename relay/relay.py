from __future__ import annotations

import logging
import time
from typing import Any

from config.settings import DEFAULT_CLAUDE_MODEL, MAX_TOKENS
from relay.errors import RelayError, RelayErrorKind
from relay.provider import ProviderClient, ProviderError, ProviderErrorKind


logger = logging.getLogger("claude_chat.relay")

PREVIEW_CHARS = 50


def _preview(text: str) -> str:
    return text[:PREVIEW_CHARS] + "..." if len(text) > PREVIEW_CHARS else text


def _map_provider_error(error: ProviderError) -> RelayError:
    if error.kind is ProviderErrorKind.AUTHENTICATION:
        logger.error("Authentication failed - check ANTHROPIC_API_KEY")
        return RelayError(RelayErrorKind.AUTHENTICATION_FAILED, repr(error))
    if error.kind is ProviderErrorKind.RATE_LIMIT:
        logger.error("Rate limit exceeded")
        return RelayError(RelayErrorKind.RATE_LIMITED, repr(error))
    return RelayError(RelayErrorKind.PROVIDER_CALL_FAILED, repr(error))


class Relay:
    """Forwards one question to the provider and returns its text answer.

    Stateless: the same instance is shared by all requests.
    """

    def __init__(
        self,
        provider: ProviderClient,
        model: str = DEFAULT_CLAUDE_MODEL,
        max_tokens: int = MAX_TOKENS,
    ) -> None:
        self.provider = provider
        self.model = model
        self.max_tokens = max_tokens

    async def ask(self, question: Any) -> str:
        if not isinstance(question, str) or not question:
            logger.warning("Missing question in request body")
            raise RelayError(RelayErrorKind.INVALID_REQUEST)

        logger.info("Processing question: question_preview=%r", _preview(question))

        started = time.perf_counter()
        try:
            reply = await self.provider.send(question, model=self.model, max_tokens=self.max_tokens)
        except ProviderError as exc:
            logger.error("Exception in /ask endpoint: %r", exc, exc_info=True)
            raise _map_provider_error(exc) from exc
        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info("Claude API response received: duration_ms=%s model=%s", duration_ms, reply.model)

        first = reply.content[0] if reply.content else None
        if first is None or first.type != "text" or first.text is None:
            response_type = first.type if first is not None else None
            logger.error("Unexpected response type from Claude: response_type=%s", response_type)
            raise RelayError(
                RelayErrorKind.UNEXPECTED_PROVIDER_RESPONSE,
                f"first content block type={response_type}",
            )

        logger.info("Sending response: response_length=%s", len(first.text))
        return first.text
