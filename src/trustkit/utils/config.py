from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from trustkit.errors import ConfigurationError

from .expression import evaluate

AES_KEY_LENGTHS = (16, 24, 32)


@dataclass
class TokenConfig:
    sign: str = ""
    time: str = "15 * 24 * 60 * 60"
    key_str: str = ""  # empty disables payload encryption

    def validate(self) -> int:
        """Check the settings and return the evaluated TTL in seconds."""
        if not self.sign:
            raise ConfigurationError("token signing secret ('sign') is required")
        ttl_seconds = evaluate(self.time)
        if ttl_seconds < 0:
            raise ConfigurationError("token TTL cannot be negative", {"time": self.time})
        if self.key_str and len(self.key_str.encode("utf-8")) not in AES_KEY_LENGTHS:
            raise ConfigurationError(
                "encryption key ('keyStr') must be 16, 24 or 32 bytes",
                {"length": len(self.key_str.encode("utf-8"))},
            )
        return ttl_seconds

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenConfig":
        key_str = data.get("keyStr", data.get("key_str", ""))
        return cls(
            sign=data.get("sign", ""),
            time=str(data.get("time", cls.time)),
            key_str=key_str or "",
        )

    @classmethod
    def from_env(cls, prefix: str = "TOKEN_", environ: Optional[Dict[str, str]] = None) -> "TokenConfig":
        env = os.environ if environ is None else environ
        return cls(
            sign=env.get(f"{prefix}SIGN", ""),
            time=env.get(f"{prefix}TIME", cls.time),
            key_str=env.get(f"{prefix}KEY_STR", ""),
        )


@dataclass
class CacheConfig:
    default_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_backoff_ms: List[int] = dataclasses.field(default_factory=lambda: [100, 500, 2000])
    circuit_breaker_enabled: bool = False


@dataclass
class StoreConfig:
    type: str = "memory"  # memory | redis
    url: Optional[str] = None
    prefix: str = "trustkit"


@dataclass
class ToolkitConfig:
    token: TokenConfig = dataclasses.field(default_factory=TokenConfig)
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    store: StoreConfig = dataclasses.field(default_factory=StoreConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolkitConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            token=TokenConfig.from_dict(data.get("token", {})),
            cache=build(CacheConfig, "cache"),
            store=build(StoreConfig, "store"),
        )
