from __future__ import annotations

import json
import logging
import sys
import typing as t

import click

from .core.token_service import TokenService
from .errors import TrustKitError
from .utils.config import TokenConfig
from .utils.expression import evaluate


class _ClaimBag:
    """Ad-hoc ClaimCarrier for claims given on the command line."""

    def __init__(self, claims: t.Dict[str, t.Any]) -> None:
        self._claims = claims

    def to_claims(self) -> t.Dict[str, t.Any]:
        return dict(self._claims)

    @classmethod
    def from_claims(cls, claims: t.Mapping[str, t.Any]) -> "_ClaimBag":
        return cls(dict(claims))


def _parse_claim(raw: str) -> t.Tuple[str, t.Any]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise click.BadParameter(f"expected name=value, got {raw!r}", param_hint="--claim")
    try:
        return name, json.loads(value)
    except ValueError:
        # bare words are taken as strings
        return name, value


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
def main(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command()
@click.argument("expression")
def ttl(expression: str) -> None:
    """Evaluate a TTL expression such as '15 * 24 * 60 * 60'."""
    try:
        click.echo(evaluate(expression))
    except TrustKitError as exc:
        raise click.ClickException(str(exc))


@main.command()
@click.option("--sign", envvar="TOKEN_SIGN", required=True, help="Signing secret")
@click.option("--time", "time_expression", envvar="TOKEN_TIME", default="15 * 24 * 60 * 60", help="TTL expression")
@click.option("--key", "key_str", envvar="TOKEN_KEY_STR", default="", help="AES key; empty disables encryption")
@click.option("--claim", "claims", multiple=True, help="Claim as name=value (value parsed as JSON when possible)")
def issue(sign: str, time_expression: str, key_str: str, claims: t.Tuple[str, ...]) -> None:
    """Print a token carrying the given claims."""
    try:
        service = TokenService(TokenConfig(sign=sign, time=time_expression, key_str=key_str))
        bag = _ClaimBag(dict(_parse_claim(raw) for raw in claims))
        click.echo(service.create_token(bag))
    except TrustKitError as exc:
        raise click.ClickException(str(exc))


@main.command()
@click.argument("token")
@click.option("--sign", envvar="TOKEN_SIGN", required=True, help="Signing secret")
@click.option("--key", "key_str", envvar="TOKEN_KEY_STR", default="", help="AES key; empty disables encryption")
def check(token: str, sign: str, key_str: str) -> None:
    """Report whether TOKEN is validly signed and unexpired."""
    try:
        service = TokenService(TokenConfig(sign=sign, key_str=key_str))
    except TrustKitError as exc:
        raise click.ClickException(str(exc))
    if service.check_token(token):
        click.echo("valid")
        return
    click.echo("invalid")
    sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
