"""Caller identity resolution for hexpack."""

from hexpack.auth.context import (
    IdentityContext,
    claims_from_event,
    user_from_claims,
)

__all__ = [
    "IdentityContext",
    "claims_from_event",
    "user_from_claims",
]
