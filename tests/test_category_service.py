"""Category tree rules: two levels, matching types, cascading delete."""

from __future__ import annotations

import pytest

from models.category import Category
from services.category_service import filter_categories, group_categories

from conftest import PASSWORD


def _cat(name, type_="expense", parent_id=None, id_=""):
    return Category(id=id_, user_id="", name=name, type=type_, parent_id=parent_id)


def _snapshot(watch, *args, **kwargs) -> list:
    snapshots = []
    watch(*args, snapshots.append, **kwargs).cancel()
    return snapshots[0]


def test_add_top_level_and_subcategory(user, category_service) -> None:
    food = category_service.add(_cat(" Food ")).value
    assert food.name == "Food"
    groceries = category_service.add(_cat("Groceries", parent_id=food.id))
    assert groceries.ok

    top = _snapshot(category_service.watch_top_level)
    assert [c.name for c in top] == ["Food"]
    subs = _snapshot(category_service.watch_subcategories, food.id)
    assert [c.name for c in subs] == ["Groceries"]


def test_no_third_level(user, category_service) -> None:
    food = category_service.add(_cat("Food")).value
    groceries = category_service.add(_cat("Groceries", parent_id=food.id)).value
    result = category_service.add(_cat("Fruit", parent_id=groceries.id))
    assert not result.ok
    assert "cannot have their own subcategories" in result.error


def test_subcategory_type_must_match_parent(user, category_service) -> None:
    salary = category_service.add(_cat("Salary", "income")).value
    result = category_service.add(_cat("Bonus", "expense", parent_id=salary.id))
    assert not result.ok


def test_category_cannot_be_its_own_parent(user, category_service) -> None:
    food = category_service.add(_cat("Food")).value
    food.parent_id = food.id
    assert not category_service.update(food).ok


def test_type_change_carries_to_subcategories(user, category_service) -> None:
    food = category_service.add(_cat("Food")).value
    category_service.add(_cat("Groceries", parent_id=food.id))
    food.type = "income"
    assert category_service.update(food).ok

    rows = _snapshot(category_service.watch_all)
    assert [(c.name, c.type) for c in rows] == [("Food", "income"), ("Groceries", "income")]


def test_parent_with_subcategories_cannot_be_nested(user, category_service) -> None:
    housing = category_service.add(_cat("Housing")).value
    bills = category_service.add(_cat("Bills")).value
    category_service.add(_cat("Power", parent_id=bills.id))
    bills.parent_id = housing.id

    result = category_service.update(bills)

    assert not result.ok
    assert "cannot become a subcategory" in result.error
    assert category_service.get_by_id(bills.id).value.parent_id is None


def test_leaf_can_move_under_another_parent(user, category_service) -> None:
    housing = category_service.add(_cat("Housing")).value
    rent = category_service.add(_cat("Rent")).value
    rent.parent_id = housing.id
    assert category_service.update(rent).ok
    assert [c.name for c in _snapshot(category_service.watch_subcategories, housing.id)] == ["Rent"]


def test_blank_name_and_bad_type_rejected(user, category_service) -> None:
    with pytest.raises(ValueError):
        category_service.add(_cat("  "))
    with pytest.raises(ValueError):
        category_service.add(_cat("Gifts", "transfer"))


def test_delete_removes_subcategories(user, category_service) -> None:
    food = category_service.add(_cat("Food")).value
    category_service.add(_cat("Groceries", parent_id=food.id))
    category_service.add(_cat("Dining", parent_id=food.id))
    category_service.add(_cat("Rent"))

    assert category_service.delete(food.id).value == 3
    assert [c.name for c in _snapshot(category_service.watch_all)] == ["Rent"]


def test_by_type_filter(user, category_service) -> None:
    category_service.add(_cat("Salary", "income"))
    category_service.add(_cat("Food", "expense"))
    assert [c.name for c in _snapshot(category_service.watch_by_type, "income")] == ["Salary"]


def test_categories_are_per_user(auth, user, category_service) -> None:
    food = category_service.add(_cat("Food")).value
    auth.logout()
    auth.register("bob@example.com", PASSWORD)
    assert _snapshot(category_service.watch_all) == []
    assert not category_service.get_by_id(food.id).ok
    # Bob cannot hang a subcategory under Alice's category
    assert not category_service.add(_cat("Snacks", parent_id=food.id)).ok


def test_group_and_filter() -> None:
    food = _cat("Food", id_="f")
    groceries = _cat("Groceries", parent_id="f", id_="g")
    rent = _cat("Rent", id_="r")
    groups = group_categories([food, groceries, rent])
    assert [(g.parent.name, [s.name for s in g.subcategories]) for g in groups] == [
        ("Food", ["Groceries"]),
        ("Rent", []),
    ]
    assert filter_categories([food, groceries, rent], "groc") == [food, groceries]
    assert filter_categories([food, groceries, rent], "") == [food, groceries, rent]
