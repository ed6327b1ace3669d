"""Ok/Err result type for engine operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from app.domain.errors import BookingError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a typed error."""

    error: BookingError

    @property
    def is_ok(self) -> bool:
        return False


Result = Ok[T] | Err
