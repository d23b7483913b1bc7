from __future__ import annotations

import re
from typing import Any


_ERROR_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")


class HexpackError(Exception):
    """Base typed error for hexpack.

    Every layer raises these; only inbound adapters (handlers) decide how
    they are represented on the wire.

    - `code` is stable for programmatic handling.
    - `message` is human readable and safe to return to callers.
    - `status_code` is the transport status this error maps to.
    """

    def __init__(
        self,
        *,
        code: str,
        message: str,
        status_code: int = 500,
        meta: dict[str, Any] | None = None,
    ) -> None:
        if not _ERROR_CODE_RE.fullmatch(code):
            raise ValueError(
                "Invalid error code. Expected dot-separated lowercase tokens, "
                f"got: {code!r}"
            )
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = int(status_code)
        self.meta = dict(meta or {})

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def to_public_dict(self, *, request_id: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if request_id:
            payload["request_id"] = request_id
        if self.meta:
            payload["meta"] = self.meta
        return payload


class ValidationError(HexpackError):
    def __init__(
        self,
        *,
        message: str = "Request validation error",
        code: str = "request.validation_error",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=400, meta=meta)


class UnauthorizedError(HexpackError):
    def __init__(
        self,
        *,
        message: str = "No user authorized",
        code: str = "auth.unauthorized",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=401, meta=meta)


class ConflictError(HexpackError):
    def __init__(
        self,
        *,
        message: str = "Name already exists",
        code: str = "request.conflict",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=409, meta=meta)


class ConfigurationError(HexpackError):
    """Deployment defect (missing setting). Never caused by the request."""

    def __init__(
        self,
        *,
        message: str = "Missing required configuration",
        code: str = "config.missing",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=500, meta=meta)


class StorageError(HexpackError):
    def __init__(
        self,
        *,
        message: str = "Storage backend error",
        code: str = "storage.error",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=500, meta=meta)


def describe_error(exc: BaseException) -> str:
    """Textual description used as the body of server-error responses."""
    return f"Error: {exc}"
