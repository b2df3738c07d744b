"""Containers for fields that may hold a single value or a list of values.

IVMS101 senders are free to encode a repeated field either as a bare value or
as an array. Both containers remember which shape they were built from and
emit that same shape again, so a decode/encode round trip is lossless.
"""

from typing import Any, Generic, Iterable, Iterator, Optional, Tuple, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from ivms101.errors import ShapeError

T = TypeVar('T')


def _item_schema(source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
    args = get_args(source_type)
    if args:
        return handler.generate_schema(args[0])
    return core_schema.any_schema()


class OneOrMany(Generic[T]):
    """One or more values; ``first()`` always exists.

    Decoding accepts a bare value or a non-empty list. An empty list matches
    neither shape and is rejected.
    """

    __slots__ = ('_items', '_many')

    def __init__(self, items: Iterable[T], many: bool = True):
        self._items: Tuple[T, ...] = tuple(items)
        self._many = many
        if not self._items:
            raise ShapeError("OneOrMany requires at least one element")
        if not many and len(self._items) != 1:
            raise ShapeError("A single-valued OneOrMany must hold exactly one element")

    @classmethod
    def one(cls, item: T) -> "OneOrMany[T]":
        return cls((item,), many=False)

    @classmethod
    def many(cls, items: Iterable[T]) -> "OneOrMany[T]":
        return cls(items, many=True)

    @property
    def is_many(self) -> bool:
        """True if the container was built from (and encodes as) a list."""
        return self._many

    def first(self) -> T:
        return self._items[0]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OneOrMany):
            return NotImplemented
        return self._many == other._many and self._items == other._items

    def __hash__(self) -> int:
        return hash((self._many, self._items))

    def __repr__(self) -> str:
        if self._many:
            return f"OneOrMany.many({list(self._items)!r})"
        return f"OneOrMany.one({self._items[0]!r})"

    @staticmethod
    def _serialize(value: "OneOrMany[Any]", handler: core_schema.SerializerFunctionWrapHandler) -> Any:
        if value.is_many:
            return [handler(item) for item in value]
        return handler(value.first())

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        item_schema = _item_schema(source_type, handler)
        shapes = [
            core_schema.no_info_after_validator_function(cls.many, core_schema.list_schema(item_schema)),
            core_schema.no_info_after_validator_function(cls.one, item_schema),
        ]
        return core_schema.json_or_python_schema(
            json_schema=core_schema.union_schema(shapes),
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls)] + shapes),
            serialization=core_schema.wrap_serializer_function_ser_schema(
                cls._serialize, info_arg=False, schema=item_schema
            ),
        )


class ZeroOrMany(Generic[T]):
    """
    Absent, one or many values.

    The three states mirror the input: ``none()`` for a missing field (or an
    explicit null), ``one(v)`` for a bare value and ``many(vs)`` for a list,
    which may be empty. For presence checks an empty list counts as absent,
    see :meth:`is_empty`.

    Models drop empty containers from their output, so a ``ZeroOrMany`` only
    makes sense as a field of an enclosing model with a ``none()`` default.
    It must not be used as the root of a message.
    """

    __slots__ = ('_items', '_state')

    _NONE = 'none'
    _ONE = 'one'
    _MANY = 'many'

    def __init__(self, items: Iterable[T] = (), state: Optional[str] = None):
        self._items: Tuple[T, ...] = tuple(items)
        if state is None:
            state = self._MANY if self._items else self._NONE
        if state == self._NONE and self._items:
            raise ShapeError("An absent ZeroOrMany cannot hold elements")
        if state == self._ONE and len(self._items) != 1:
            raise ShapeError("A single-valued ZeroOrMany must hold exactly one element")
        self._state = state

    @classmethod
    def none(cls) -> "ZeroOrMany[T]":
        return cls((), state=cls._NONE)

    @classmethod
    def one(cls, item: T) -> "ZeroOrMany[T]":
        return cls((item,), state=cls._ONE)

    @classmethod
    def many(cls, items: Iterable[T]) -> "ZeroOrMany[T]":
        return cls(items, state=cls._MANY)

    @classmethod
    def from_optional(cls, item: Optional[T]) -> "ZeroOrMany[T]":
        if item is None:
            return cls.none()
        return cls.one(item)

    @property
    def is_absent(self) -> bool:
        return self._state == self._NONE

    @property
    def is_many(self) -> bool:
        return self._state == self._MANY

    def is_empty(self) -> bool:
        """True for the absent state and for an empty list."""
        return not self._items

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZeroOrMany):
            return NotImplemented
        return self._state == other._state and self._items == other._items

    def __hash__(self) -> int:
        return hash((self._state, self._items))

    def __repr__(self) -> str:
        if self._state == self._NONE:
            return "ZeroOrMany.none()"
        if self._state == self._ONE:
            return f"ZeroOrMany.one({self._items[0]!r})"
        return f"ZeroOrMany.many({list(self._items)!r})"

    @staticmethod
    def _serialize(value: "ZeroOrMany[Any]", handler: core_schema.SerializerFunctionWrapHandler) -> Any:
        if value.is_absent:
            return None
        if value.is_many:
            return [handler(item) for item in value]
        return handler(value.first())

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        item_schema = _item_schema(source_type, handler)
        shapes = [
            core_schema.no_info_after_validator_function(lambda _: cls.none(), core_schema.none_schema()),
            core_schema.no_info_after_validator_function(cls.many, core_schema.list_schema(item_schema)),
            core_schema.no_info_after_validator_function(cls.one, item_schema),
        ]
        return core_schema.json_or_python_schema(
            json_schema=core_schema.union_schema(shapes),
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls)] + shapes),
            serialization=core_schema.wrap_serializer_function_ser_schema(
                cls._serialize, info_arg=False, schema=item_schema
            ),
        )
