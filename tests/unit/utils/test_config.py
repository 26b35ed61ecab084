"""Unit tests for configuration dataclasses."""

import pytest

from trustkit.errors import ConfigurationError
from trustkit.utils.config import CacheConfig, StoreConfig, TokenConfig, ToolkitConfig


class TestTokenConfig:
    """Test token settings loading and validation."""

    def test_defaults(self):
        config = TokenConfig(sign="secret")
        assert config.time == "15 * 24 * 60 * 60"
        assert config.key_str == ""
        assert config.validate() == 1296000

    def test_missing_sign_fails_fast(self):
        with pytest.raises(ConfigurationError, match="signing secret"):
            TokenConfig().validate()

    def test_malformed_time_fails(self):
        with pytest.raises(ConfigurationError):
            TokenConfig(sign="secret", time="1 day").validate()

    def test_negative_ttl_fails(self):
        with pytest.raises(ConfigurationError, match="negative"):
            TokenConfig(sign="secret", time="10 - 20").validate()

    @pytest.mark.parametrize("key", ["short", "0123456789abcdef0", "x" * 33])
    def test_bad_key_length_fails(self, key):
        with pytest.raises(ConfigurationError, match="16, 24 or 32 bytes"):
            TokenConfig(sign="secret", key_str=key).validate()

    @pytest.mark.parametrize("key", ["a" * 16, "b" * 24, "c" * 32])
    def test_valid_key_lengths(self, key):
        assert TokenConfig(sign="secret", time="60", key_str=key).validate() == 60

    def test_from_dict_accepts_original_keys(self):
        config = TokenConfig.from_dict({"sign": "s", "time": "24 * 60 * 60", "keyStr": "k" * 16})
        assert config.sign == "s"
        assert config.time == "24 * 60 * 60"
        assert config.key_str == "k" * 16

    def test_from_dict_snake_case_key(self):
        config = TokenConfig.from_dict({"sign": "s", "key_str": "k" * 32})
        assert config.key_str == "k" * 32
        assert config.time == "15 * 24 * 60 * 60"

    def test_from_env(self):
        environ = {"TOKEN_SIGN": "env-secret", "TOKEN_TIME": "30 * 60"}
        config = TokenConfig.from_env(environ=environ)
        assert config.sign == "env-secret"
        assert config.validate() == 1800
        assert config.key_str == ""

    def test_from_env_custom_prefix(self):
        config = TokenConfig.from_env(prefix="AUTH_", environ={"AUTH_SIGN": "x", "AUTH_KEY_STR": "y" * 24})
        assert config.sign == "x"
        assert config.key_str == "y" * 24


class TestToolkitConfig:
    """Test composed configuration."""

    def test_defaults(self):
        config = ToolkitConfig()
        assert isinstance(config.cache, CacheConfig)
        assert config.cache.default_ttl_seconds == 3600
        assert config.cache.retry_attempts == 1
        assert config.store.type == "memory"

    def test_from_dict(self):
        config = ToolkitConfig.from_dict(
            {
                "token": {"sign": "s", "time": "60"},
                "cache": {"retry_attempts": 3, "circuit_breaker_enabled": True},
                "store": {"type": "redis", "url": "redis://cache:6379/1", "prefix": "app"},
            }
        )
        assert config.token.sign == "s"
        assert config.cache.retry_attempts == 3
        assert config.cache.circuit_breaker_enabled is True
        assert config.store == StoreConfig(type="redis", url="redis://cache:6379/1", prefix="app")

    def test_from_dict_rejects_unknown_cache_option(self):
        with pytest.raises(TypeError):
            ToolkitConfig.from_dict({"cache": {"no_such_option": 1}})
