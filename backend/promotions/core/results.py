"""Tagged success/failure results returned across the service boundary."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_CODE = "DUPLICATE_CODE"
    LIST_DISCOUNTS_FAILED = "LIST_DISCOUNTS_FAILED"
    GET_DISCOUNT_FAILED = "GET_DISCOUNT_FAILED"
    CREATE_DISCOUNT_FAILED = "CREATE_DISCOUNT_FAILED"
    UPDATE_DISCOUNT_FAILED = "UPDATE_DISCOUNT_FAILED"
    DELETE_DISCOUNT_FAILED = "DELETE_DISCOUNT_FAILED"
    LIST_USAGE_FAILED = "LIST_USAGE_FAILED"
    METRICS_FAILED = "METRICS_FAILED"


@dataclass(frozen=True)
class ServiceError:
    code: ErrorCode
    message: str


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Either ``data`` (success) or ``error`` (failure), never both."""

    data: T | None = None
    error: ServiceError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def success(data: T) -> ServiceResult[T]:
    return ServiceResult(data=data)


def failure(code: ErrorCode, message: str) -> ServiceResult[T]:
    return ServiceResult(error=ServiceError(code=code, message=message))
