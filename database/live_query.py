import logging
import sqlite3
from typing import Callable

from database.db_manager import DatabaseManager

logger = logging.getLogger(__name__)


class Subscription:
    """A live query over one collection.

    Delivers the current result set to on_snapshot immediately, then again
    after every committed change to the collection, until cancel() is called.
    A failing query, or a stored row that cannot be parsed, reports its
    message to on_error once and cancels itself.
    """

    def __init__(
        self,
        db: DatabaseManager,
        collection: str,
        fetch: Callable[[], list],
        on_snapshot: Callable[[list], None],
        on_error: Callable[[str], None] | None = None,
    ):
        self._db = db
        self._collection = collection
        self._fetch = fetch
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._active = True
        db.add_listener(collection, self._refresh)
        self._refresh()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def collection(self) -> str:
        return self._collection

    def _refresh(self):
        if not self._active:
            return
        try:
            snapshot = self._fetch()
        except (sqlite3.Error, ValueError) as e:
            logger.warning("Live query on %s failed: %s", self._collection, e)
            self.cancel()
            if self._on_error:
                self._on_error(str(e))
            return
        logger.debug("%s snapshot: %d document(s)", self._collection, len(snapshot))
        self._on_snapshot(snapshot)

    def cancel(self):
        if self._active:
            self._active = False
            self._db.remove_listener(self._collection, self._refresh)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc):
        self.cancel()
