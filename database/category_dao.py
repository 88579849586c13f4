import uuid
from dataclasses import replace
from typing import Callable, Optional

from database.db_manager import DatabaseManager
from database.live_query import Subscription
from models.category import Category
from utils.constants import CATEGORIES
from utils.errors import NotFoundError


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            type=row["type"],
            parent_id=row["parent_id"],
        )

    def query(
        self,
        user_id: str,
        type_filter: str | None = None,
        parent_id: str | None = None,
        top_level: bool = False,
    ) -> list[Category]:
        """type_filter: 'income' or 'expense'. top_level keeps parent_id IS NULL;
        parent_id keeps the direct subcategories of that parent."""
        conn = self._db.get_connection()
        sql = "SELECT * FROM categories WHERE user_id = ?"
        params: list = [user_id]
        if type_filter:
            sql += " AND type = ?"
            params.append(type_filter)
        if top_level:
            sql += " AND parent_id IS NULL"
        elif parent_id is not None:
            sql += " AND parent_id = ?"
            params.append(parent_id)
        sql += " ORDER BY name COLLATE NOCASE"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def listen(
        self,
        user_id: str,
        on_snapshot: Callable[[list[Category]], None],
        on_error: Callable[[str], None] | None = None,
        **filters,
    ) -> Subscription:
        return Subscription(
            self._db, CATEGORIES,
            lambda: self.query(user_id, **filters),
            on_snapshot, on_error,
        )

    def get_by_id(self, category_id: str) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, category: Category) -> Category:
        category = replace(category, id=uuid.uuid4().hex)
        conn = self._db.get_connection()
        conn.execute(
            "INSERT INTO categories(id, user_id, name, type, parent_id) VALUES (?, ?, ?, ?, ?)",
            (category.id, category.user_id, category.name, category.type, category.parent_id),
        )
        self._db.commit(CATEGORIES)
        return category

    def update(self, category: Category) -> Category:
        """Subcategories follow their parent's type in the same commit."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE categories SET name=?, type=?, parent_id=? WHERE id=? AND user_id=?",
            (category.name, category.type, category.parent_id, category.id, category.user_id),
        )
        if cursor.rowcount == 0:
            conn.rollback()
            raise NotFoundError(CATEGORIES, category.id)
        conn.execute(
            "UPDATE categories SET type=? WHERE parent_id=? AND user_id=?",
            (category.type, category.id, category.user_id),
        )
        self._db.commit(CATEGORIES)
        return category

    def delete(self, category_id: str, user_id: str) -> int:
        """Delete a category and its subcategories. Returns count removed."""
        conn = self._db.get_connection()
        children = conn.execute(
            "DELETE FROM categories WHERE parent_id = ? AND user_id = ?",
            (category_id, user_id),
        ).rowcount
        cursor = conn.execute(
            "DELETE FROM categories WHERE id = ? AND user_id = ?", (category_id, user_id)
        )
        if cursor.rowcount == 0:
            conn.rollback()
            raise NotFoundError(CATEGORIES, category_id)
        self._db.commit(CATEGORIES)
        return children + 1
