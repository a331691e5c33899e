"""
Data models for statistics module.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union


StatValue = Union[int, float, str, None, List[Any], Dict[Any, Any]]


@dataclass
class Stats:
    """
    Container for statistical results collected from a population.

    Statistics are organized into categories (e.g., 'structure', 'temporal')
    with named values within each category.
    """
    categories: Dict[str, Dict[str, StatValue]] = field(default_factory=dict)

    def add_value(self, category: str, name: str, value: StatValue) -> None:
        """Add a statistical value to a category."""
        self.categories.setdefault(category, {})[name] = value

    def add_values(self, category: str, values: Mapping[str, StatValue]) -> None:
        """Add several values to a category at once."""
        self.categories.setdefault(category, {}).update(values)

    def get_value(self, category: str, name: str, default: Optional[StatValue] = None) -> Optional[StatValue]:
        """Get a statistical value from a category."""
        return self.categories.get(category, {}).get(name, default)

    def get_category(self, category: str) -> Dict[str, StatValue]:
        """Get all values in a category."""
        return self.categories.get(category, {})

    def merge(self, other: Stats) -> None:
        """Merge another Stats object into this one; values in other win."""
        for category, values in other.categories.items():
            self.add_values(category, values)

    def __len__(self) -> int:
        return sum(len(values) for values in self.categories.values())

    def to_dict(self) -> Dict[str, Dict[str, StatValue]]:
        """Convert to a plain dictionary (a deep copy)."""
        return copy.deepcopy(self.categories)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, StatValue]]) -> Stats:
        """Create from a plain dictionary."""
        return cls(categories=copy.deepcopy(data))
