from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Category:
    id: str
    user_id: str
    name: str
    type: str                       # 'income' | 'expense'
    parent_id: Optional[str] = None  # None = top level

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None


@dataclass
class CategoryGroup:
    """A top-level category with its direct subcategories."""
    parent: Category
    subcategories: list[Category] = field(default_factory=list)
