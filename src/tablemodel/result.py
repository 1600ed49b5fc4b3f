"""
Success/failure values returned by the table model's ``try_`` accessors.

A display widget decides its own fallback for a failed lookup instead of
receiving a default chosen inside the model.
"""
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Lookup succeeded.
    """
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Lookup failed; ``error`` is the exception that caused it.
    """
    error: Exception

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        """Re-raise the captured error."""
        raise self.error

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Ok | Err
