from relay.errors import RelayError, RelayErrorKind
from relay.provider import (
    AnthropicProvider,
    ContentBlock,
    MissingCredentialProvider,
    ProviderClient,
    ProviderError,
    ProviderErrorKind,
    ProviderReply,
    build_provider,
)
from relay.relay import Relay

__all__ = [
    "AnthropicProvider",
    "ContentBlock",
    "MissingCredentialProvider",
    "ProviderClient",
    "ProviderError",
    "ProviderErrorKind",
    "ProviderReply",
    "Relay",
    "RelayError",
    "RelayErrorKind",
    "build_provider",
]
