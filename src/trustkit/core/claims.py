"""Mapping between payload objects and token claim sets.

Payload types take part in tokens through the :class:`ClaimCarrier` protocol.
Dataclasses get it for free from :class:`ClaimsMixin`, which only reads and
writes the fields declared with :func:`claim`::

    @dataclass
    class Session(ClaimsMixin):
        user_id: int = claim(default=0)
        roles: List[str] = claim(default_factory=list)
        display_name: str = ""  # never placed in a token

Every claim value travels as JSON text, so a token's claim set is a flat
``name -> str`` mapping regardless of the field types.
"""

from __future__ import annotations

import dataclasses
import functools
import typing as t

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, from_json, to_json

from trustkit.errors import ArgumentError, InstantiationError, SerializationError

CLAIM_MARKER = "trustkit.claim"

C = t.TypeVar("C", bound="ClaimCarrier")


@t.runtime_checkable
class ClaimCarrier(t.Protocol):
    def to_claims(self) -> t.Dict[str, t.Any]:  # pragma: no cover - interface
        ...

    @classmethod
    def from_claims(cls: t.Type[C], claims: t.Mapping[str, t.Any]) -> C:  # pragma: no cover - interface
        ...


def claim(**kwargs: t.Any) -> t.Any:
    """Declare a dataclass field that participates in token claims.

    Accepts the same keyword arguments as :func:`dataclasses.field`.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[CLAIM_MARKER] = True
    return dataclasses.field(metadata=metadata, **kwargs)


@functools.lru_cache(maxsize=None)
def _claim_adapters(cls: type) -> t.Dict[str, TypeAdapter]:
    hints = t.get_type_hints(cls)
    return {
        f.name: TypeAdapter(hints.get(f.name, t.Any))
        for f in dataclasses.fields(cls)
        if f.metadata.get(CLAIM_MARKER)
    }


class ClaimsMixin:
    """ClaimCarrier implementation for dataclasses using :func:`claim` fields."""

    @classmethod
    def claim_names(cls) -> t.Tuple[str, ...]:
        return tuple(_claim_adapters(cls))

    def to_claims(self) -> t.Dict[str, t.Any]:
        return {name: getattr(self, name) for name in self.claim_names()}

    @classmethod
    def from_claims(cls, claims: t.Mapping[str, t.Any]):
        try:
            instance = cls()
        except TypeError as exc:
            raise InstantiationError(
                f"{cls.__name__} cannot be constructed without arguments",
                {"type": cls.__name__},
            ) from exc

        for name, adapter in _claim_adapters(cls).items():
            if name not in claims:
                continue
            try:
                value = adapter.validate_python(claims[name])
            except ValidationError as exc:
                raise SerializationError(
                    f"claim {name!r} does not fit {cls.__name__}.{name}",
                    {"claim": name, "type": cls.__name__},
                ) from exc
            # bypasses frozen dataclasses' __setattr__
            object.__setattr__(instance, name, value)
        return instance


def extract_claims(payload: t.Any) -> t.Dict[str, str]:
    """Return the payload's marked fields as a ``name -> JSON text`` mapping."""
    if payload is None:
        raise ArgumentError("payload cannot be None")
    if not isinstance(payload, ClaimCarrier):
        raise SerializationError(
            f"{type(payload).__name__} does not provide to_claims()/from_claims()",
            {"type": type(payload).__name__},
        )

    encoded: t.Dict[str, str] = {}
    for name, value in payload.to_claims().items():
        try:
            encoded[name] = to_json(value).decode("utf-8")
        except PydanticSerializationError as exc:
            raise SerializationError(f"claim {name!r} is not serializable", {"claim": name}) from exc
    return encoded


def inject_claims(claims: t.Mapping[str, t.Any], target_type: t.Type[C]) -> C:
    """Build a ``target_type`` instance from a claim set produced by :func:`extract_claims`.

    Entries that are not JSON text (such as the registered ``exp`` claim) are
    passed through as-is; the target only picks up the names it marks.
    """
    if target_type is None:
        raise ArgumentError("target type cannot be None")
    if not callable(getattr(target_type, "from_claims", None)):
        raise InstantiationError(
            f"{getattr(target_type, '__name__', target_type)!s} does not provide from_claims()",
        )

    decoded: t.Dict[str, t.Any] = {}
    for name, raw in claims.items():
        if not isinstance(raw, str):
            decoded[name] = raw
            continue
        try:
            decoded[name] = from_json(raw)
        except ValueError as exc:
            raise SerializationError(f"claim {name!r} is not valid JSON", {"claim": name}) from exc
    return target_type.from_claims(decoded)
