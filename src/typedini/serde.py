# -*- encoding: utf-8 -*-
# @File   : serde.py
# @Time   : 2026/10/18 14:21:40

"""Conversions between node text and typed values.

A `Serializer` turns a value into node text, a `Deserializer` does the
reverse. Deserializers take a `DeserializerMode` telling how the text is
prepared before conversion, and declare whether they may be used to produce
a type other than their own (`allow_cast`).

Fixed-width numbers (`u8` ... `i64`, `f32`, `f64`) behave like C numbers:
an out-of-range value wraps around instead of failing, e.g. `256` read as
`u8` gives `0`.
"""

from abc import ABCMeta, abstractmethod
from ctypes import (
    c_double, c_float,
    c_int8, c_int16, c_int32, c_int64,
    c_uint8, c_uint16, c_uint32, c_uint64
)
from enum import Flag, auto
from re import ASCII, IGNORECASE
from re import compile as regex
from typing import Any, ClassVar, Generic, Self, TypeVar

from .errors import CastNotAllowed, InvalidNodeValue, NoConverterFound
from .text import trim

T = TypeVar('T')
_N = TypeVar('_N', int, float)

__all__ = [
    'DeserializerMode', 'Serializer', 'Deserializer',
    'FixedInt', 'FixedFloat',
    'u8', 'u16', 'u32', 'u64', 'i8', 'i16', 'i32', 'i64', 'f32', 'f64',
    'NumberSerializer', 'NumberDeserializer',
    'U8Serializer', 'U16Serializer', 'U32Serializer', 'U64Serializer',
    'I8Serializer', 'I16Serializer', 'I32Serializer', 'I64Serializer',
    'F32Serializer', 'F64Serializer',
    'U8Deserializer', 'U16Deserializer', 'U32Deserializer', 'U64Deserializer',
    'I8Deserializer', 'I16Deserializer', 'I32Deserializer', 'I64Deserializer',
    'F32Deserializer', 'F64Deserializer',
    'StringSerializer', 'StringDeserializer',
    'IntSerializer', 'IntDeserializer',
    'FloatSerializer', 'FloatDeserializer',
    'BoolSerializer', 'BoolDeserializer',
    'ListSerializer', 'ListDeserializer',
    'register_serializer', 'register_deserializer',
    'serializer_for', 'deserializer_for',
    'check_cast', 'narrow',
]

_INTEGER = regex(r'\s*[+-]?[0-9]+\s*', ASCII)
_FLOAT = regex(
    r'\s*[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?'
    r'|inf(?:inity)?|nan)\s*',
    ASCII | IGNORECASE)


class DeserializerMode(Flag):
    """How the raw text is prepared before conversion.

    Members combine with `|`, new options just take the next `auto()` bit.
    """
    NONE = 0
    TRIM = auto()


class FixedInt(int):
    bits: ClassVar[int] = 0
    signed: ClassVar[bool] = True
    _ctype: ClassVar[type] = c_int64

    @classmethod
    def narrow(cls, value: Any) -> Self:
        # ctypes masks the value into its width, like a C cast does.
        return cls(cls._ctype(int(value)).value)


class FixedFloat(float):
    bits: ClassVar[int] = 0
    _ctype: ClassVar[type] = c_double

    @classmethod
    def narrow(cls, value: Any) -> Self:
        return cls(cls._ctype(float(value)).value)


class u8(FixedInt):
    bits, signed, _ctype = 8, False, c_uint8


class u16(FixedInt):
    bits, signed, _ctype = 16, False, c_uint16


class u32(FixedInt):
    bits, signed, _ctype = 32, False, c_uint32


class u64(FixedInt):
    bits, signed, _ctype = 64, False, c_uint64


class i8(FixedInt):
    bits, signed, _ctype = 8, True, c_int8


class i16(FixedInt):
    bits, signed, _ctype = 16, True, c_int16


class i32(FixedInt):
    bits, signed, _ctype = 32, True, c_int32


class i64(FixedInt):
    bits, signed, _ctype = 64, True, c_int64


class f32(FixedFloat):
    bits, _ctype = 32, c_float


class f64(FixedFloat):
    bits, _ctype = 64, c_double


def narrow(value_type: type[T], value: Any) -> T:
    """Convert `value` into `value_type`, wrapping fixed-width numbers."""
    if issubclass(value_type, (FixedInt, FixedFloat)):
        return value_type.narrow(value)
    return value_type(value)


class Serializer(Generic[T], metaclass=ABCMeta):
    value_type: ClassVar[type] = object

    @abstractmethod
    def __call__(self, value: T) -> str:
        raise NotImplementedError


class Deserializer(Generic[T], metaclass=ABCMeta):
    value_type: ClassVar[type] = object
    allow_cast: ClassVar[bool] = False

    def __init__(self, mode: DeserializerMode = DeserializerMode.NONE) -> None:
        self._mode = mode

    @property
    def mode(self) -> DeserializerMode:
        return self._mode

    def has_mode(self, mode: DeserializerMode) -> bool:
        return mode in self._mode

    def default_parse(self, text: str) -> str:
        """Apply the preparation steps selected by `self.mode`."""
        if self.has_mode(DeserializerMode.TRIM):
            return trim(text)
        return text

    @abstractmethod
    def __call__(self, text: str) -> T:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._mode!r})'


_SERIALIZERS: dict[type, type[Serializer]] = {}
_DESERIALIZERS: dict[type, type[Deserializer]] = {}

S = TypeVar('S', bound=type[Serializer])
D = TypeVar('D', bound=type[Deserializer])


def register_serializer(cls: S) -> S:
    """Make `cls` the default serializer of its `value_type`."""
    _SERIALIZERS[cls.value_type] = cls
    return cls


def register_deserializer(cls: D) -> D:
    """Make `cls` the default deserializer of its `value_type`."""
    _DESERIALIZERS[cls.value_type] = cls
    return cls


def serializer_for(value_type: type) -> type[Serializer]:
    # subclasses of a registered type (IntEnum, str subclasses...)
    # fall back to their nearest registered base.
    for i in value_type.__mro__:
        if i in _SERIALIZERS:
            return _SERIALIZERS[i]
    raise NoConverterFound(value_type)


def deserializer_for(value_type: type) -> type[Deserializer]:
    try:
        return _DESERIALIZERS[value_type]
    except KeyError:
        raise NoConverterFound(value_type) from None


def check_cast(
    deserializer: Deserializer | type[Deserializer], target: type
) -> None:
    """Refuse producing `target` with a deserializer of another type,
    unless that deserializer allows casting."""
    if deserializer.allow_cast or deserializer.value_type is target:
        return
    raise CastNotAllowed(
        deserializer if isinstance(deserializer, type) else type(deserializer),
        target)


class NumberSerializer(Serializer[_N]):
    def __call__(self, value: _N) -> str:
        return str(narrow(self.value_type, value))


class NumberDeserializer(Deserializer[_N]):
    def __call__(self, text: str) -> _N:
        buf = self.default_parse(text)
        if issubclass(self.value_type, int):
            if not _INTEGER.fullmatch(buf):
                raise InvalidNodeValue(text)
            return narrow(self.value_type, int(buf))
        if not _FLOAT.fullmatch(buf):
            raise InvalidNodeValue(text)
        return narrow(self.value_type, float(buf))


def _number_converters(value_type: type) -> tuple[
    type[NumberSerializer],
    type[NumberDeserializer]
]:
    prefix = value_type.__name__.upper()
    body = {'value_type': value_type, '__module__': __name__}
    return (
        register_serializer(ABCMeta(
            f'{prefix}Serializer', (NumberSerializer,), dict(body))),
        register_deserializer(ABCMeta(
            f'{prefix}Deserializer', (NumberDeserializer,), dict(body))),
    )


U8Serializer, U8Deserializer = _number_converters(u8)
U16Serializer, U16Deserializer = _number_converters(u16)
U32Serializer, U32Deserializer = _number_converters(u32)
U64Serializer, U64Deserializer = _number_converters(u64)

I8Serializer, I8Deserializer = _number_converters(i8)
I16Serializer, I16Deserializer = _number_converters(i16)
I32Serializer, I32Deserializer = _number_converters(i32)
I64Serializer, I64Deserializer = _number_converters(i64)

F32Serializer, F32Deserializer = _number_converters(f32)
F64Serializer, F64Deserializer = _number_converters(f64)


@register_serializer
class IntSerializer(NumberSerializer[int]):
    value_type = int


@register_deserializer
class IntDeserializer(NumberDeserializer[int]):
    """Unbounded Python `int`, nothing gets wrapped."""
    value_type = int


@register_serializer
class FloatSerializer(NumberSerializer[float]):
    value_type = float


@register_deserializer
class FloatDeserializer(NumberDeserializer[float]):
    value_type = float


@register_serializer
class StringSerializer(Serializer[str]):
    value_type = str

    def __call__(self, value: str) -> str:
        return str(value)


@register_deserializer
class StringDeserializer(Deserializer[str]):
    """Returns the text as is (after the mode), and may be cast to
    anything constructible from a string."""
    value_type = str
    allow_cast = True

    def __call__(self, text: str) -> str:
        return self.default_parse(text)


@register_serializer
class BoolSerializer(Serializer[bool]):
    value_type = bool

    def __call__(self, value: bool) -> str:
        return 'true' if value else 'false'


@register_deserializer
class BoolDeserializer(Deserializer[bool]):
    """Only the first letter counts: `1`/`y`/`t` or `0`/`n`/`f`."""
    value_type = bool
    TRUTHY: ClassVar[str] = '1yt'
    FALSY: ClassVar[str] = '0nf'

    def __call__(self, text: str) -> bool:
        head = trim(self.default_parse(text))[:1].lower()
        if head and head in self.TRUTHY:
            return True
        if head and head in self.FALSY:
            return False
        raise InvalidNodeValue(text)


@register_serializer
class ListSerializer(Serializer[list]):
    value_type = list

    def __init__(self, item: Serializer | None = None) -> None:
        self._item = item

    def __call__(self, value: list) -> str:
        if self._item is not None:
            return ','.join(self._item(i) for i in value)
        return ','.join(serializer_for(type(i))()(i) for i in value)


@register_deserializer
class ListDeserializer(Deserializer[list]):
    """Comma separated values, each converted by `item`
    (a trimming `StringDeserializer` by default)."""
    value_type = list

    def __init__(
        self,
        mode: DeserializerMode = DeserializerMode.NONE,
        item: Deserializer | None = None
    ) -> None:
        super().__init__(mode)
        self._item = item or StringDeserializer(DeserializerMode.TRIM)

    def __call__(self, text: str) -> list:
        return [self._item(i) for i in self.default_parse(text).split(',')]
