#!/usr/bin/env python3
"""Issue a session token and cache a profile lookup behind it.

Run against the in-memory store, or a local Redis with `--store redis`.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

import click

from trustkit import CacheAside, ClaimsMixin, TokenConfig, TokenService, build_store, claim
from trustkit.utils.config import StoreConfig

logger = logging.getLogger(__name__)


@dataclass
class Session(ClaimsMixin):
    user_id: int = claim(default=0)
    roles: List[str] = claim(default_factory=list)
    scratch: List[str] = field(default_factory=list)


async def load_profile(user_id: int) -> dict:
    # stands in for a slow database query
    await asyncio.sleep(0.2)
    logger.info("loaded profile %s from the database", user_id)
    return {"id": user_id, "name": f"user-{user_id}"}


async def run(store_type: str, redis_url: str, sign: str, key: str) -> None:
    tokens = TokenService(TokenConfig(sign=sign, time="30 * 60", key_str=key))
    cache = CacheAside(build_store(StoreConfig(type=store_type, url=redis_url, prefix="demo")))

    token = tokens.create_token(Session(user_id=7, roles=["reader"]))
    click.echo(f"token: {token}")
    click.echo(f"valid: {tokens.check_token(token)}")

    session = tokens.parse_token(token, Session)
    key_name = f"profile:{session.user_id}"
    profiles = await asyncio.gather(
        *[cache.get_or_compute(key_name, lambda: load_profile(session.user_id)) for _ in range(5)]
    )
    click.echo(f"profiles: {profiles[0]} (x{len(profiles)}, loaded once)")
    await cache.delete(key_name)


@click.command()
@click.option(
    "--store",
    "store_type",
    type=click.Choice(["memory", "redis"], case_sensitive=False),
    default="memory",
    help="Cache store to use",
)
@click.option("--redis-url", default="redis://localhost:6379/0", help="Redis URL for the redis store")
@click.option("--sign", envvar="TOKEN_SIGN", default="demo-signing-secret-change-me-0123456789", help="Signing secret")
@click.option("--key", envvar="TOKEN_KEY_STR", default="", help="16/24/32-byte AES key; empty disables encryption")
@click.option("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
def main(store_type: str, redis_url: str, sign: str, key: str, log_level: str) -> int:
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run(store_type, redis_url, sign, key))
    return 0


if __name__ == "__main__":
    main()
