"""Ordered, type-checked container for models returned by reads."""

from typing import Any, Generic, Iterable, Iterator, List, Optional, Type, TypeVar

T = TypeVar('T')


class ModelCollection(Generic[T]):
    """Ordered collection that only accepts instances of one type.

    Example:
        users = ModelCollection(UserAccount)
        users.add(UserAccount(name='ada'))
        users.add('ada')  # TypeError
    """

    def __init__(self, item_type: Type[T], items: Optional[Iterable[T]] = None):
        self.item_type = item_type
        self._items: List[T] = []
        for item in items or ():
            self.add(item)

    def add(self, item: T) -> 'ModelCollection[T]':
        """Append an item, rejecting anything that is not an item_type instance."""
        if not isinstance(item, self.item_type):
            raise TypeError(
                f"{type(self).__name__}[{self.item_type.__name__}] "
                f"cannot hold {type(item).__name__}"
            )
        self._items.append(item)
        return self

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def to_list(self) -> List[T]:
        return list(self._items)

    def ids(self) -> List[Any]:
        """Identifiers of the contained models, in order."""
        return [item.get_id() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{self.item_type.__name__}]({self._items!r})"
