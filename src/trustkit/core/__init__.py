"""Core module for claim mapping and token creation/verification."""

from .cipher import PayloadCipher
from .claims import ClaimCarrier, ClaimsMixin, claim, extract_claims, inject_claims
from .token_service import TokenDescriptor, TokenService

__all__ = [
    # Claim mapping
    "ClaimCarrier",
    "ClaimsMixin",
    "claim",
    "extract_claims",
    "inject_claims",
    # Tokens
    "TokenService",
    "TokenDescriptor",
    "PayloadCipher",
]
