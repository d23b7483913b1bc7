"""
Identity context for the current request.

Only works for callers that sit behind an authorizer which has already
verified the token and filled in the claims; nothing here verifies
signatures.

The current user lives in a ContextVar, so it is scoped to the running
thread/task. A Lambda process handles one request at a time, but the same
code stays correct under a threaded or async host.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

from hexpack.kernel.errors import UnauthorizedError
from hexpack.models import AppUser

logger = structlog.get_logger()

DEFAULT_ID_CLAIMS = ("cognito:username", "sub")
DEFAULT_NAME_CLAIM = "name"

_current_user_var: ContextVar[AppUser | None] = ContextVar("hexpack_current_user", default=None)


def user_from_claims(
    claims: Mapping[str, Any],
    *,
    id_claims: Sequence[str] = DEFAULT_ID_CLAIMS,
    name_claim: str = DEFAULT_NAME_CLAIM,
) -> AppUser:
    """Build an AppUser from claims. Missing values become empty strings."""
    user_id = next((str(claims[key]) for key in id_claims if claims.get(key)), "")
    return AppUser(id=user_id, name=str(claims.get(name_claim) or ""))


def claims_from_event(event: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Pull `requestContext.authorizer.claims` out of an API Gateway event."""
    claims: Any = event
    for key in ("requestContext", "authorizer", "claims"):
        if not isinstance(claims, Mapping):
            return None
        claims = claims.get(key)
    return claims if isinstance(claims, Mapping) else None


class IdentityContext:
    """
    Holds at most one authenticated user for the current unit of work.

    Usage:
        identity.initialize(claims)
        try:
            user = identity.get_user()
            ...
        finally:
            identity.destroy()

    or simply `with identity.scope(claims): ...`.
    """

    def __init__(
        self,
        id_claims: Sequence[str] = DEFAULT_ID_CLAIMS,
        name_claim: str = DEFAULT_NAME_CLAIM,
    ):
        self._id_claims = tuple(id_claims)
        self._name_claim = name_claim

    def initialize(self, raw_claims: Mapping[str, Any] | None) -> None:
        """Resolve the current user from claims, or clear it when there are none."""
        if raw_claims:
            user = user_from_claims(
                raw_claims,
                id_claims=self._id_claims,
                name_claim=self._name_claim,
            )
            _current_user_var.set(user)
            logger.debug("Identity initialized", user_id=user.id)
        else:
            self.destroy()

    def destroy(self) -> None:
        _current_user_var.set(None)

    def has_user(self) -> bool:
        return _current_user_var.get() is not None

    def get_user(self) -> AppUser:
        """
        Return the current user.

        Raises:
            UnauthorizedError: If no user is held
        """
        user = _current_user_var.get()
        if user is None:
            raise UnauthorizedError()
        return user

    @contextmanager
    def scope(self, raw_claims: Mapping[str, Any] | None) -> Iterator[IdentityContext]:
        """Initialize for the duration of the block; always destroyed on exit."""
        self.initialize(raw_claims)
        try:
            yield self
        finally:
            self.destroy()

    def __repr__(self) -> str:
        user = _current_user_var.get()
        return f"IdentityContext(user={user.id if user else None})"
