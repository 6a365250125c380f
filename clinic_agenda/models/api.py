# File: clinic_agenda/models/api.py
"""
Records returned to callers of the intake boundary.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ValidationError:
    """Represents a validation error."""
    field: str
    message: str
    entry_index: Optional[int] = None

    def __str__(self) -> str:
        """String representation of error."""
        if self.entry_index is not None:
            return f"Entry {self.entry_index} - {self.field}: {self.message}"
        return f"{self.field}: {self.message}"
