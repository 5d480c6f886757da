"""
Example domain model read by ``PersonRowMapper``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Person:
    """A person row: name in column A, age in column B."""

    name: Optional[str] = None
    age: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "age": self.age}
