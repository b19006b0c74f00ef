"""Client-side ordering of product lists."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Union

from food_explorer.integrations.contracts.products import Product


class SortOption(str, Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    GRADE_ASC = "grade-asc"
    GRADE_DESC = "grade-desc"


DEFAULT_SORT = SortOption.NAME_ASC

SORT_LABELS = {
    SortOption.NAME_ASC: "Name (A-Z)",
    SortOption.NAME_DESC: "Name (Z-A)",
    SortOption.GRADE_ASC: "Nutrition Grade (Best First)",
    SortOption.GRADE_DESC: "Nutrition Grade (Worst First)",
}

_GRADE_RANK = {"a": 1, "b": 2, "c": 3, "d": 4, "e": 5}
_UNGRADED_RANK = 99


def _grade_rank(product: Product) -> int:
    return _GRADE_RANK.get(product.nutriscore_grade or "", _UNGRADED_RANK)


def _name_key(product: Product) -> str:
    return product.display_name.casefold()


def sort_products(products: Iterable[Product], option: Union[SortOption, str] = DEFAULT_SORT) -> List[Product]:
    """
    Return a new, stably sorted list.

    Ungraded products rank after "e", so they come last best-first and first
    worst-first. Raises ValueError for an unknown option.
    """
    option = SortOption(option)
    if option is SortOption.NAME_ASC:
        return sorted(products, key=_name_key)
    if option is SortOption.NAME_DESC:
        return sorted(products, key=_name_key, reverse=True)
    if option is SortOption.GRADE_ASC:
        return sorted(products, key=_grade_rank)
    return sorted(products, key=_grade_rank, reverse=True)
