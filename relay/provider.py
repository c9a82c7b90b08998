from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Protocol, runtime_checkable

import anthropic
from pydantic import BaseModel, Field

from config.settings import Settings


logger = logging.getLogger("claude_chat.provider")


class ProviderErrorKind(str, Enum):
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    API_STATUS = "api_status"
    CONNECTION = "connection"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Tagged failure raised by a provider client.

    ``status`` is the HTTP status the provider reported, or None when the
    call never got a response.
    """

    def __init__(self, kind: ProviderErrorKind, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"ProviderError(kind={self.kind.value!r}, status={self.status!r}, message={self.message!r})"


class ContentBlock(BaseModel):
    type: str = Field(..., description="Block type reported by the provider, e.g. 'text'")
    text: Optional[str] = None


class ProviderReply(BaseModel):
    content: List[ContentBlock] = Field(default_factory=list)
    model: Optional[str] = None


@runtime_checkable
class ProviderClient(Protocol):
    """Anything that can answer a single-turn prompt."""

    async def send(self, prompt: str, *, model: str, max_tokens: int) -> ProviderReply: ...


def _kind_for_status(status: Optional[int]) -> ProviderErrorKind:
    if status == 401:
        return ProviderErrorKind.AUTHENTICATION
    if status == 429:
        return ProviderErrorKind.RATE_LIMIT
    return ProviderErrorKind.API_STATUS


def _to_block(block: Any) -> ContentBlock:
    block_type = getattr(block, "type", None) or "unknown"
    text = getattr(block, "text", None)
    return ContentBlock(type=str(block_type), text=text if isinstance(text, str) else None)


class AnthropicProvider:
    """Provider client backed by the Anthropic Messages API."""

    def __init__(self, client: anthropic.AsyncAnthropic) -> None:
        self._client = client

    async def send(self, prompt: str, *, model: str, max_tokens: int) -> ProviderReply:
        try:
            message = await self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as exc:
            status = getattr(exc, "status_code", None)
            raise ProviderError(_kind_for_status(status), str(exc), status=status) from exc
        except anthropic.APIConnectionError as exc:
            # Also covers APITimeoutError.
            raise ProviderError(ProviderErrorKind.CONNECTION, str(exc)) from exc
        except Exception as exc:
            raise ProviderError(ProviderErrorKind.UNKNOWN, f"{type(exc).__name__}: {exc}") from exc

        blocks = [_to_block(block) for block in (getattr(message, "content", None) or [])]
        return ProviderReply(content=blocks, model=getattr(message, "model", None))


class MissingCredentialProvider:
    """Stands in for the real client when no API key is configured.

    Lets the app import and answer health checks without a credential;
    every /ask then fails as an authentication error.
    """

    async def send(self, prompt: str, *, model: str, max_tokens: int) -> ProviderReply:
        raise ProviderError(
            ProviderErrorKind.AUTHENTICATION,
            "ANTHROPIC_API_KEY not set. Please configure it in environment or .env",
        )


def build_provider(settings: Settings) -> ProviderClient:
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set; /ask requests will fail until it is configured")
        return MissingCredentialProvider()

    # Retries are disabled: one upstream call per request.
    client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key, max_retries=0)
    logger.info("Anthropic client created: model=%s", settings.claude_model)
    return AnthropicProvider(client)
