from __future__ import annotations

import enum
import typing as t


class ZakatErrorCode(str, enum.Enum):
    INVALID_CURRENCY = "INVALID_CURRENCY"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    RATE_LIMITED = "RATE_LIMITED"
    PARSE_ERROR = "PARSE_ERROR"
    API_ERROR = "API_ERROR"
    CIRCUIT_OPEN = "CIRCUIT_OPEN"


class ZakatError(Exception):
    """Raised for every failure surfaced by the price client and service."""

    def __init__(
        self,
        code: ZakatErrorCode,
        message: str,
        *,
        status_code: t.Optional[int] = None,
        retry_after: t.Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        if self.code in (ZakatErrorCode.NETWORK_ERROR, ZakatErrorCode.TIMEOUT):
            return True
        return self.code == ZakatErrorCode.API_ERROR and (self.status_code or 0) >= 500

    def __repr__(self) -> str:
        return (
            f"ZakatError(code={self.code.value!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )
