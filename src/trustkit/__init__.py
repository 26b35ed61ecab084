"""trustkit

Building blocks for an application's trust layer: signed, time-limited,
optionally encrypted bearer tokens for annotated payload objects, and a
cache-aside accessor with at most one concurrent recomputation per key.
"""

from .cache import CacheAside, KeyedLockPool
from .core import (
    ClaimCarrier,
    ClaimsMixin,
    PayloadCipher,
    TokenDescriptor,
    TokenService,
    claim,
    extract_claims,
    inject_claims,
)
from .errors import (
    ArgumentError,
    CacheError,
    ConfigurationError,
    CryptoError,
    InstantiationError,
    NotFoundError,
    SerializationError,
    StoreUnavailableError,
    TokenError,
    TrustKitError,
    VerificationError,
)
from .storage import CacheStore, InMemoryStore, RedisStore, build_store
from .utils import CacheConfig, StoreConfig, TokenConfig, ToolkitConfig, evaluate

__all__ = [
    "TokenService",
    "TokenDescriptor",
    "PayloadCipher",
    "ClaimCarrier",
    "ClaimsMixin",
    "claim",
    "extract_claims",
    "inject_claims",
    "CacheAside",
    "KeyedLockPool",
    "CacheStore",
    "InMemoryStore",
    "RedisStore",
    "build_store",
    "TokenConfig",
    "CacheConfig",
    "StoreConfig",
    "ToolkitConfig",
    "evaluate",
    "TrustKitError",
    "ConfigurationError",
    "ArgumentError",
    "TokenError",
    "SerializationError",
    "InstantiationError",
    "VerificationError",
    "CryptoError",
    "CacheError",
    "NotFoundError",
    "StoreUnavailableError",
]

__version__ = "0.1.0"
