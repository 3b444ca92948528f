"""
CompositeList — Один изменяемый список поверх нескольких списков

Логическая конкатенация (в порядке подключения) нескольких backing-списков.
Элементы не копируются: составной список хранит ссылки на constituent-списки
и транслирует каждую операцию в нужный из них.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Глобальный индекс ↔ ровно одна пара (constituent, локальный индекс)
   по порядку непустых constituent; пустые не занимают индексов
2. Трансляция индексов вычисляется на каждом обращении, без кэша
3. Каждая операция, меняющая состав, синхронно вызывает ровно одно
   уведомление added/removed на каждый изменённый элемент

Ограничения (сохраняются намеренно):
- add() без constituent молча ничего не делает
- copy_to() в недостаточно ёмкий target молча ничего не делает
- Изменение constituent во время итерации даёт неопределённый результат
"""

import operator
from typing import (
    Callable,
    Iterable,
    Iterator,
    List,
    MutableSequence,
    Optional,
    Tuple,
    TypeVar,
)

from loguru import logger


T = TypeVar("T")

ItemHandler = Callable[["CompositeList[T]", T], None]


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ReadOnlyCompositeListError(TypeError):
    """Изменяющая операция над составным списком только для чтения."""
    pass


# =============================================================================
# ITERATOR
# =============================================================================


class CompositeListIterator(Iterator[T]):
    """
    Ленивый однонаправленный итератор по constituent-спискам.

    Работает с живым списком constituent (не снимком); reset() начинает
    обход заново.
    """

    def __init__(self, lists: List[MutableSequence[T]]):
        self._lists = lists
        self._list_index = -1
        self._current: Optional[Iterator[T]] = None

    def reset(self) -> None:
        self._list_index = -1
        self._current = None

    def __iter__(self) -> "CompositeListIterator[T]":
        return self

    def __next__(self) -> T:
        while True:
            if self._current is None:
                if self._list_index + 1 >= len(self._lists):
                    raise StopIteration
                self._list_index += 1
                self._current = iter(self._lists[self._list_index])
            try:
                return next(self._current)
            except StopIteration:
                # Текущий constituent исчерпан или пуст, переход к следующему
                self._current = None


# =============================================================================
# COMPOSITE LIST
# =============================================================================


class CompositeList(MutableSequence[T]):
    """
    Составной изменяемый список.

    Уведомления: on_item_added / on_item_removed регистрируют обработчики
    handler(composite, item), вызываемые синхронно до возврата из операции.
    """

    def __init__(self, lists: Optional[Iterable[MutableSequence[T]]] = None):
        """
        Args:
            lists: начальные constituent-списки (в порядке подключения)
        """
        self._lists: List[MutableSequence[T]] = []
        self._added_handlers: List[ItemHandler] = []
        self._removed_handlers: List[ItemHandler] = []

        if lists is not None:
            self.add_list_range(lists)

    # -------------------------------------------------------------------------
    # Уведомления
    # -------------------------------------------------------------------------

    def on_item_added(self, handler: ItemHandler) -> None:
        self._added_handlers.append(handler)

    def on_item_removed(self, handler: ItemHandler) -> None:
        self._removed_handlers.append(handler)

    def disconnect(self, handler: ItemHandler) -> None:
        """Отключение обработчика от обоих уведомлений."""
        # bound method каждый раз новый объект, поэтому сравнение по ==
        self._added_handlers = [h for h in self._added_handlers if h != handler]
        self._removed_handlers = [h for h in self._removed_handlers if h != handler]

    def _fire_added(self, item: T) -> None:
        for handler in list(self._added_handlers):
            handler(self, item)

    def _fire_removed(self, item: T) -> None:
        for handler in list(self._removed_handlers):
            handler(self, item)

    # -------------------------------------------------------------------------
    # Constituent-списки
    # -------------------------------------------------------------------------

    @property
    def lists(self) -> Tuple[MutableSequence[T], ...]:
        """Подключённые constituent-списки (снимок порядка подключения)."""
        return tuple(self._lists)

    def add_list(self, lst: Optional[MutableSequence[T]]) -> None:
        """
        Подключение constituent в конец.

        Для каждого уже имеющегося в нём элемента — уведомление added.
        """
        if lst is None:
            return
        self._lists.append(lst)
        logger.debug(f"CompositeList: constituent attached, items={len(lst)}")
        for item in lst:
            self._fire_added(item)

    def remove_list(self, lst: Optional[MutableSequence[T]]) -> None:
        """
        Отключение constituent (поиск по identity).

        Для каждого его элемента — уведомление removed. Сам список
        не изменяется.
        """
        if lst is None:
            return
        for position, attached in enumerate(self._lists):
            if attached is lst:
                del self._lists[position]
                break
        else:
            return
        logger.debug(f"CompositeList: constituent detached, items={len(lst)}")
        for item in lst:
            self._fire_removed(item)

    def add_list_range(self, lists: Optional[Iterable[MutableSequence[T]]]) -> None:
        if lists is None:
            return
        for lst in lists:
            self.add_list(lst)

    # -------------------------------------------------------------------------
    # Трансляция индексов
    # -------------------------------------------------------------------------

    def _list_for_index(self, index: int) -> Tuple[Optional[MutableSequence[T]], int]:
        """
        Constituent и локальный индекс для глобального индекса.

        Returns:
            (constituent, локальный индекс) или (None, -1)
        """
        count = 0
        for lst in self._lists:
            size = len(lst)
            if size == 0:
                continue
            if count <= index < count + size:
                return lst, index - count
            count += size
        return None, -1

    def _list_for_item(self, item: T) -> Tuple[Optional[MutableSequence[T]], int, int]:
        """
        Первый constituent (в порядке подключения), содержащий item.

        Returns:
            (constituent, локальный индекс, глобальный индекс) или (None, -1, -1)
        """
        offset = 0
        for lst in self._lists:
            for local, candidate in enumerate(lst):
                if candidate == item:
                    return lst, local, offset + local
            offset += len(lst)
        return None, -1, -1

    def _normalize_index(self, index: int) -> int:
        """Приведение индекса к неотрицательному; вне диапазона — IndexError."""
        index = operator.index(index)
        size = len(self)
        if index < 0:
            index += size
        if index < 0 or index >= size:
            raise IndexError("CompositeList index out of range")
        return index

    # -------------------------------------------------------------------------
    # Read-only
    # -------------------------------------------------------------------------

    @property
    def is_read_only(self) -> bool:
        return False

    def _check_writable(self) -> None:
        if self.is_read_only:
            raise ReadOnlyCompositeListError("CompositeList is read-only")

    # -------------------------------------------------------------------------
    # Sequence
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return sum(len(lst) for lst in self._lists)

    def __getitem__(self, index: int) -> T:
        lst, local = self._list_for_index(self._normalize_index(index))
        return lst[local]

    def __setitem__(self, index: int, value: T) -> None:
        self._check_writable()
        lst, local = self._list_for_index(self._normalize_index(index))
        old_value = lst[local]
        lst[local] = value
        self._fire_removed(old_value)
        self._fire_added(value)

    def __delitem__(self, index: int) -> None:
        self.remove_at(index)

    def __iter__(self) -> CompositeListIterator[T]:
        return CompositeListIterator(self._lists)

    def __contains__(self, item: object) -> bool:
        return self.index_of(item) >= 0

    def __repr__(self) -> str:
        return f"CompositeList({[list(lst) for lst in self._lists]!r})"

    def index_of(self, item: T) -> int:
        """Глобальный индекс первого вхождения item или -1."""
        _, _, index = self._list_for_item(item)
        return index

    # -------------------------------------------------------------------------
    # MutableSequence
    # -------------------------------------------------------------------------

    def insert(self, index: int, item: T) -> None:
        """
        Вставка перед элементом с глобальным индексом index.

        index == len(self) — вставка в конец, как add(): элемент уходит
        в последний constituent.

        Raises:
            IndexError: индекс вне [0, len(self)]
        """
        self._check_writable()
        if operator.index(index) == len(self):
            self.add(item)
            return

        lst, local = self._list_for_index(self._normalize_index(index))
        lst.insert(local, item)
        self._fire_added(item)

    def add(self, item: T) -> None:
        """
        Добавление в последний подключённый constituent.

        Без constituent ничего не происходит (и уведомления нет).
        """
        self._check_writable()
        if not self._lists:
            return
        self._lists[-1].append(item)
        self._fire_added(item)

    def append(self, item: T) -> None:
        self.add(item)

    def remove(self, item: T) -> bool:
        """
        Удаление первого вхождения item (по равенству).

        Returns:
            True если элемент найден и удалён
        """
        self._check_writable()
        lst, local, _ = self._list_for_item(item)
        if lst is None:
            return False
        removed = lst[local]
        del lst[local]
        self._fire_removed(removed)
        return True

    def remove_at(self, index: int) -> None:
        """
        Удаление элемента по глобальному индексу.

        Raises:
            IndexError: индекс вне диапазона
        """
        self._check_writable()
        lst, local = self._list_for_index(self._normalize_index(index))
        item = lst[local]
        del lst[local]
        self._fire_removed(item)

    def clear(self) -> None:
        """Очистка всех constituent; уведомления — после всех удалений."""
        self._check_writable()
        removed: List[T] = []
        for lst in self._lists:
            removed.extend(lst)
            lst.clear()
        for item in removed:
            self._fire_removed(item)

    def copy_to(self, target: MutableSequence[T], offset: int = 0) -> None:
        """
        Копирование элементов в target, начиная с позиции offset.

        Если места от offset до конца target не хватает, ничего не
        копируется.

        Raises:
            ValueError: target is None
            IndexError: offset вне target
        """
        if target is None:
            raise ValueError("target is required")
        if offset < 0 or offset >= len(target):
            raise IndexError("offset out of target range")

        if len(target) - offset < len(self):
            return
        for position, item in enumerate(self, start=offset):
            target[position] = item
