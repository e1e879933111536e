"""Identity generator port.

Supplies globally unique string identifiers (table ids, generated
UUID defaults) and the current time (timestamps, CurrentTimestamp
defaults).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class IdentityGenerator(Protocol):
    """Protocol for identifier and clock access."""

    @abstractmethod
    def new_id(self) -> str:
        """Return a new globally unique identifier."""
        ...

    @abstractmethod
    def now(self) -> str:
        """Return the current time as an ISO-8601 string."""
        ...
