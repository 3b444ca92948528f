"""Containers — составные коллекции без копирования элементов."""

from .composite_list import (
    CompositeList,
    CompositeListIterator,
    ReadOnlyCompositeListError,
)

__all__ = [
    "CompositeList",
    "CompositeListIterator",
    "ReadOnlyCompositeListError",
]
