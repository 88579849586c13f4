from dataclasses import replace
from typing import Callable

from database.category_dao import CategoryDAO
from database.live_query import Subscription
from models.category import Category, CategoryGroup
from services.auth_service import AuthService
from utils.constants import CATEGORIES
from utils.errors import NotFoundError
from utils.result import Result, capture
from utils.validation import require_category_name, validate_category_type

SnapshotCallback = Callable[[list[Category]], None]
ErrorCallback = Callable[[str], None]


def group_categories(categories: list[Category]) -> list[CategoryGroup]:
    """Top-level categories with their subcategories, in input order.

    Subcategories whose parent is not in the list are shown as their own group.
    """
    by_id = {c.id: c for c in categories}
    groups: dict[str, CategoryGroup] = {}
    for cat in categories:
        if cat.parent_id is None or cat.parent_id not in by_id:
            groups.setdefault(cat.id, CategoryGroup(parent=cat))
    for cat in categories:
        if cat.parent_id is not None and cat.parent_id in by_id:
            groups.setdefault(cat.parent_id, CategoryGroup(parent=by_id[cat.parent_id]))
            groups[cat.parent_id].subcategories.append(cat)
    return list(groups.values())


def filter_categories(categories: list[Category], query: str) -> list[Category]:
    """Case-insensitive name match. A matching subcategory keeps its parent."""
    query = query.strip().lower()
    if not query:
        return list(categories)
    by_id = {c.id: c for c in categories}
    keep: set[str] = set()
    for cat in categories:
        if query in cat.name.lower():
            keep.add(cat.id)
            if cat.parent_id in by_id:
                keep.add(cat.parent_id)
    return [c for c in categories if c.id in keep]


class CategoryService:
    def __init__(self, category_dao: CategoryDAO, auth: AuthService):
        self._dao = category_dao
        self._auth = auth

    def watch_all(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None) -> Subscription:
        return self._dao.listen(self._auth.current_user_id(), on_snapshot, on_error)

    def watch_by_type(
        self, type_: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None
    ) -> Subscription:
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error, type_filter=type_
        )

    def watch_top_level(
        self, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None,
        type_: str | None = None,
    ) -> Subscription:
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error,
            type_filter=type_, top_level=True,
        )

    def watch_subcategories(
        self, parent_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None
    ) -> Subscription:
        return self._dao.listen(
            self._auth.current_user_id(), on_snapshot, on_error, parent_id=parent_id
        )

    def get_by_id(self, category_id: str) -> Result:
        user_id = self._auth.current_user_id()
        result = capture("Loading category", self._dao.get_by_id, category_id)
        if result.ok and (result.value is None or result.value.user_id != user_id):
            return Result.failure(NotFoundError(CATEGORIES, category_id))
        return result

    def add(self, category: Category) -> Result:
        category = replace(
            category,
            user_id=self._auth.current_user_id(),
            name=require_category_name(category.name),
            type=validate_category_type(category.type),
        )
        problem = self._check_parent(category)
        if problem:
            return Result.failure(problem)
        return capture("Adding category", self._dao.create, category)

    def update(self, category: Category) -> Result:
        category = replace(
            category,
            user_id=self._auth.current_user_id(),
            name=require_category_name(category.name),
            type=validate_category_type(category.type),
        )
        if category.parent_id == category.id:
            return Result.failure("A category cannot be its own parent.")
        if category.parent_id is not None and self._dao.query(
            category.user_id, parent_id=category.id
        ):
            return Result.failure("A category with subcategories cannot become a subcategory.")
        problem = self._check_parent(category)
        if problem:
            return Result.failure(problem)
        return capture("Updating category", self._dao.update, category)

    def delete(self, category_id: str) -> Result:
        """Deletes the category together with its subcategories."""
        user_id = self._auth.current_user_id()
        return capture("Deleting category", self._dao.delete, category_id, user_id)

    def _check_parent(self, category: Category) -> str | None:
        """Only two levels, and a subcategory shares its parent's type."""
        if category.parent_id is None:
            return None
        parent = self.get_by_id(category.parent_id)
        if not parent.ok:
            return parent.error
        if parent.value.parent_id is not None:
            return "Subcategories cannot have their own subcategories."
        if parent.value.type != category.type:
            return f"A subcategory of '{parent.value.name}' must be {parent.value.type}."
        return None
