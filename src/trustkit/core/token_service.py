from __future__ import annotations

import logging
import time
import typing as t
from dataclasses import dataclass, field, replace

import jwt

from trustkit.errors import (
    ArgumentError,
    ConfigurationError,
    SerializationError,
    TokenError,
    TrustKitError,
    VerificationError,
)
from trustkit.monitoring.metrics import token_operations_total
from trustkit.utils.config import TokenConfig
from trustkit.utils.expression import evaluate

from .cipher import PayloadCipher
from .claims import C, extract_claims, inject_claims

_logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
EXPIRY_CLAIM = "exp"
REGISTERED_CLAIMS = frozenset({"iss", "sub", "aud", "exp", "nbf", "iat", "jti"})


@dataclass(frozen=True)
class TokenDescriptor:
    sign_secret: str = field(repr=False)
    ttl_expression: str
    ttl_seconds: int
    encryption_key: t.Optional[str] = field(default=None, repr=False)

    @property
    def encrypted(self) -> bool:
        return bool(self.encryption_key)


class TokenService:
    """Creates and parses signed, time-limited bearer tokens for ClaimCarrier payloads.

    Tokens are HS256 JWTs whose claims are the payload's marked fields, each
    encoded as JSON text, plus an ``exp`` timestamp. When an encryption key is
    configured the payload segment is AES-encrypted after signing and
    decrypted again before verification.
    """

    def __init__(self, config: TokenConfig, clock: t.Optional[t.Callable[[], float]] = None) -> None:
        ttl_seconds = config.validate()
        self._descriptor = TokenDescriptor(
            sign_secret=config.sign,
            ttl_expression=config.time,
            ttl_seconds=ttl_seconds,
            encryption_key=config.key_str or None,
        )
        self._clock = clock or time.time

    @property
    def descriptor(self) -> TokenDescriptor:
        return self._descriptor

    @property
    def ttl_seconds(self) -> int:
        return self._descriptor.ttl_seconds

    @property
    def ttl_expression(self) -> str:
        return self._descriptor.ttl_expression

    @ttl_expression.setter
    def ttl_expression(self, expression: str) -> None:
        ttl_seconds = evaluate(expression)
        if ttl_seconds < 0:
            raise ConfigurationError("token TTL cannot be negative", {"time": expression})
        self._descriptor = replace(self._descriptor, ttl_expression=expression, ttl_seconds=ttl_seconds)

    @property
    def encryption_key(self) -> t.Optional[str]:
        return self._descriptor.encryption_key

    @encryption_key.setter
    def encryption_key(self, key: t.Optional[str]) -> None:
        if key:
            PayloadCipher(key)  # reject unusable keys before swapping
        self._descriptor = replace(self._descriptor, encryption_key=key or None)

    def create_token(self, payload: t.Any) -> str:
        descriptor = self._descriptor
        try:
            claims: t.Dict[str, t.Any] = dict(extract_claims(payload))
            clashes = sorted(REGISTERED_CLAIMS.intersection(claims))
            if clashes:
                raise SerializationError(f"claim names {clashes} are reserved", {"claims": clashes})
            claims[EXPIRY_CLAIM] = int(self._clock()) + descriptor.ttl_seconds
            token = jwt.encode(claims, descriptor.sign_secret, algorithm=ALGORITHM)
            if descriptor.encrypted:
                token = PayloadCipher(descriptor.encryption_key).encrypt_token(token)
        except (TokenError, ArgumentError):
            token_operations_total.inc(operation="create", outcome="failure")
            raise
        except Exception as exc:
            token_operations_total.inc(operation="create", outcome="failure")
            raise TokenError("error creating token") from exc
        token_operations_total.inc(operation="create", outcome="success")
        return token

    def parse_token(self, token: str, target_type: t.Type[C]) -> C:
        if not token:
            raise ArgumentError("token cannot be None or empty")
        if target_type is None:
            raise ArgumentError("target type cannot be None")
        try:
            claims = self._verify(token, self._descriptor)
            claims.pop(EXPIRY_CLAIM, None)
            instance = inject_claims(claims, target_type)
        except TokenError:
            token_operations_total.inc(operation="parse", outcome="failure")
            raise
        except Exception as exc:
            token_operations_total.inc(operation="parse", outcome="failure")
            raise TokenError("error processing token") from exc
        token_operations_total.inc(operation="parse", outcome="success")
        return instance

    def check_token(self, token: t.Optional[str]) -> bool:
        if not token:
            token_operations_total.inc(operation="check", outcome="invalid")
            return False
        try:
            self._verify(token, self._descriptor)
        except TrustKitError as exc:
            _logger.debug("token check failed: %s", exc)
            token_operations_total.inc(operation="check", outcome="invalid")
            return False
        except Exception as exc:  # noqa: BLE001 - check_token never raises
            _logger.debug("token check failed unexpectedly: %r", exc)
            token_operations_total.inc(operation="check", outcome="invalid")
            return False
        token_operations_total.inc(operation="check", outcome="valid")
        return True

    def _verify(self, token: str, descriptor: TokenDescriptor) -> t.Dict[str, t.Any]:
        if descriptor.encrypted:
            token = PayloadCipher(descriptor.encryption_key).decrypt_token(token)
        try:
            claims = jwt.decode(
                token,
                descriptor.sign_secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "require": [EXPIRY_CLAIM]},
            )
        except jwt.InvalidTokenError as exc:
            raise VerificationError(f"token verification failed: {exc}") from exc

        expires_at = claims[EXPIRY_CLAIM]
        if isinstance(expires_at, bool) or not isinstance(expires_at, int):
            raise VerificationError("token expiry is not an integer timestamp")
        # expired only once the current second is past the expiry second
        if int(self._clock()) > expires_at:
            raise VerificationError("token has expired", {"expired_at": expires_at})
        return claims
