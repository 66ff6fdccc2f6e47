"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from typing import Optional

from core.domain.exceptions import EmailMissingError


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """
    Email value object.

    Accounts are keyed case-insensitively, so the stored value is
    always trimmed and lower-cased.
    """

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")
        if self.value != self.value.strip().lower():
            raise ValueError(f"Email address is not normalized: {self.value}")

    @classmethod
    def normalize(cls, raw: Optional[str]) -> "Email":
        """
        Build an Email from raw client input.

        Args:
            raw: Email as received (any case, may be padded)

        Returns:
            Normalized Email

        Raises:
            EmailMissingError: If the value is empty or has no '@'
        """
        value = str(raw or "").strip().lower()
        if not value or "@" not in value:
            raise EmailMissingError()
        return cls(value)

    def __str__(self) -> str:
        """Return email as string."""
        return self.value
