"""Exception hierarchy shared by the token and cache components."""

from __future__ import annotations

import typing as t


class TrustKitError(Exception):
    """Base exception for all trustkit errors."""

    def __init__(self, message: str, context: t.Optional[t.Dict[str, t.Any]] = None) -> None:
        self.context = context or {}
        super().__init__(message)


class ConfigurationError(TrustKitError):
    """Raised when configuration (secret, TTL expression, cipher key) is invalid."""


class ArgumentError(TrustKitError, ValueError):
    """Raised for null or empty keys, payloads and tokens."""


class TokenError(TrustKitError):
    """Raised when a token cannot be created or parsed."""


class SerializationError(TokenError):
    """Raised when a claim value cannot be encoded or decoded."""


class InstantiationError(TokenError):
    """Raised when a target type cannot be constructed without arguments."""


class VerificationError(TokenError):
    """Raised for a bad signature, an expired token or a malformed token."""


class CryptoError(TokenError):
    """Raised when payload encryption or decryption fails."""


class CacheError(TrustKitError):
    """Base exception for cache accessor errors."""


class NotFoundError(CacheError, KeyError):
    """Raised when neither the cache nor the supplier produced a value."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


class StoreUnavailableError(CacheError):
    """Raised when the store circuit breaker is open."""
