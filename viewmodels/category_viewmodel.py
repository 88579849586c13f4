from models.category import Category, CategoryGroup
from services.category_service import CategoryService, filter_categories, group_categories
from utils.result import Result
from viewmodels.base import ViewModel
from viewmodels.state import data_or

_STREAM = "categories"


class CategoryViewModel(ViewModel):
    def __init__(self, category_service: CategoryService):
        super().__init__()
        self._svc = category_service
        self.search_query = ""

    def load_all(self):
        self._start_stream(_STREAM, self._svc.watch_all)

    def load_by_type(self, type_: str):
        self._start_stream(
            _STREAM, lambda ok, err: self._svc.watch_by_type(type_, ok, err)
        )

    def load_top_level(self, type_: str | None = None):
        self._start_stream(
            _STREAM, lambda ok, err: self._svc.watch_top_level(ok, err, type_=type_)
        )

    def set_search(self, query: str):
        self.search_query = query
        self._notify()

    @property
    def categories(self) -> list[Category]:
        return filter_categories(data_or(self.state, []), self.search_query)

    @property
    def groups(self) -> list[CategoryGroup]:
        return group_categories(self.categories)

    def top_level_choices(self, type_: str) -> list[Category]:
        """Possible parents for a new category of type_."""
        return [
            c for c in data_or(self.state, [])
            if c.is_top_level and c.type == type_
        ]

    def add(self, name: str, type_: str, parent_id: str | None = None) -> Result:
        category = Category(id="", user_id="", name=name, type=type_, parent_id=parent_id)
        return self._mutate(lambda: self._svc.add(category))

    def update(self, category: Category) -> Result:
        return self._mutate(lambda: self._svc.update(category))

    def delete(self, category_id: str) -> Result:
        return self._mutate(lambda: self._svc.delete(category_id))
