# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2026/10/18 15:03:26

"""
INI document: nodes (`name = value`) grouped by the header above them.

    ```ini
    key = val  ; nodes before any header belong to the "" header.

    [section]
    key233 = val666
    key233 = val114514  ; duplicated names are kept, in order.
    ```

Nested sections, multi-line values and escapes are not supported:
a `;` always starts a comment.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Self, TypeVar
from warnings import warn

from .errors import (
    EmptyNodeValue,
    HeaderNotFound,
    InvalidNodeValue,
    MalformedHeader,
    MalformedNode,
    NoConverterFound
)
from .serde import (
    Deserializer,
    DeserializerMode,
    Serializer,
    check_cast,
    deserializer_for,
    narrow,
    serializer_for
)
from .text import trim

__all__ = ['Node', 'Header', 'Structure']

T = TypeVar('T')

logger = logging.getLogger(__name__)


class Node:
    """A single `name = value` entry.

    The value is kept as raw text, untouched. Whether spaces around it
    matter is up to the deserializer reading it (see `DeserializerMode`).
    """

    def __init__(self, name: str, value: str = '') -> None:
        self._name = name
        self._value = value

    @classmethod
    def from_raw(cls, raw: str) -> Self:
        name, delimiter, value = raw.partition('=')
        if not delimiter:
            raise MalformedNode(raw)
        return cls(trim(name), value)

    @classmethod
    def from_value(
        cls, name: str, value: Any, serializer: Serializer | None = None
    ) -> Self:
        return cls(name).set(value, serializer)

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def raw_value(self) -> str:
        return self._value

    def get(
        self, deserializer: Deserializer, as_type: type | None = None
    ) -> Any:
        """Read the value with `deserializer`.

        With `as_type`, the result is converted into that type, which needs
        either `as_type` being the deserializer's own type, or a
        deserializer allowing casts.

        Raises:
            CastNotAllowed: before anything gets read.
            EmptyNodeValue: the value is blank.
            InvalidNodeValue: the text (or the cast) can't be converted.
        """
        if as_type is not None:
            check_cast(deserializer, as_type)
        if not trim(self._value):
            raise EmptyNodeValue(str(self))
        ret = deserializer(self._value)
        if as_type is None or isinstance(ret, as_type):
            return ret
        return self.__cast(ret, as_type)

    def __cast(self, value: Any, target: type) -> Any:
        # text goes through the parser registered for the target, if any.
        if isinstance(value, str):
            try:
                return deserializer_for(target)()(value)
            except NoConverterFound:
                pass
        try:
            return narrow(target, value)
        except (TypeError, ValueError):
            raise InvalidNodeValue(self._value) from None

    def get_as(
        self,
        value_type: type[T],
        deserializer: Deserializer | type[Deserializer] | None = None,
        mode: DeserializerMode | None = None
    ) -> T:
        """Read the value as `value_type`.

        `deserializer` may be an instance, or a class constructed with
        `mode` (`NONE` if not given). If omitted, the one registered for
        `value_type` is used. An instance already has its own mode, so
        passing `mode` along with one is a `TypeError`.
        """
        if deserializer is None:
            deserializer = deserializer_for(value_type)
        if not isinstance(deserializer, type) and mode is not None:
            raise TypeError(
                'mode only applies when no deserializer instance is given.')
        check_cast(deserializer, value_type)
        if isinstance(deserializer, type):
            deserializer = deserializer(
                DeserializerMode.NONE if mode is None else mode)
        return self.get(deserializer, value_type)

    def set(self, value: Any, serializer: Serializer | None = None) -> Self:
        """Replace the raw value with the serialized `value`."""
        if serializer is None:
            serializer = serializer_for(type(value))()
        self._value = serializer(value)
        return self

    def __str__(self) -> str:
        return f'{self._name} = {self._value}'

    def __repr__(self) -> str:
        return f'Node({self._name!r}, {self._value!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (self._name, self._value) == (other.name, other.raw_value)

    __hash__ = None  # mutable


def _unreadable_header(name: str) -> bool:
    return trim(name) != name or any(i in name for i in '];\n')


def _unreadable_node(node: Node) -> str | None:
    """Which part of `node` a parse of its rendered line would change."""
    name, value = node.name, node.raw_value
    if (trim(name) != name or name.startswith('[')
            or any(i in name for i in '=;\n')):
        return 'name'
    if ';' in value or '\n' in value:
        return 'value'
    return None


@dataclass(frozen=True)
class Header:
    """A section label. Two headers are the same iff their names are."""
    name: str

    @classmethod
    def from_raw(cls, raw: str) -> Self:
        buf = trim(raw)
        opening, closing = buf.find('['), buf.find(']')
        if opening < 0 or closing < 0:
            raise MalformedHeader(raw)
        if closing < opening:
            # the name is whatever lies between them, i.e. nothing.
            warn(f'"]" comes before "[" in header line {raw!r}.',
                 stacklevel=2)
        return cls(trim(buf[opening + 1:closing]))

    def __str__(self) -> str:
        return f'[{self.name}]'


class Structure(Mapping[str, list[Node]]):
    """Parsed INI document, mapping header names to their nodes.

    Headers are kept by name only, in the order they were first seen.
    Looking up an unknown header raises `HeaderNotFound` (a `KeyError`).
    """

    def __init__(self) -> None:
        self.__tree: dict[str, list[Node]] = {}

    @classmethod
    def from_raw(cls, data: str) -> Self:
        """Parse INI text. The first malformed line aborts the whole parse."""
        ret = cls()
        current = Header('')
        count = 0
        for line in data.split('\n'):
            line = trim(line.partition(';')[0])
            if not line:
                continue
            if line[0] == '[':
                current = Header.from_raw(line)
                continue
            ret.add_node(current, Node.from_raw(line))
            count += 1
        logger.debug('parsed %d node(s) under %d header(s).', count, len(ret))
        return ret

    def add_node(self, header: Header | str, node: Node) -> Self:
        if isinstance(header, Header):
            header = header.name
        self.__tree.setdefault(header, []).append(node)
        return self

    def add_nodes(self, header: Header | str, nodes: Iterable[Node]) -> Self:
        if isinstance(header, Header):
            header = header.name
        self.__tree.setdefault(header, []).extend(nodes)
        return self

    def all_nodes_of(self, header_name: str) -> list[Node]:
        try:
            return self.__tree[header_name]
        except KeyError:
            raise HeaderNotFound(header_name) from None

    def headers(self) -> list[Header]:
        return [Header(i) for i in self.__tree]

    def __getitem__(self, key: str) -> list[Node]:
        return self.all_nodes_of(key)

    def __contains__(self, key: object) -> bool:
        return key in self.__tree

    def __iter__(self) -> Iterator[str]:
        return iter(self.__tree)

    def __len__(self) -> int:
        return len(self.__tree)

    def __repr__(self) -> str:
        return 'Structure { %s }' % ', '.join(
            f'{Header(k)}: {len(v)}' for k, v in self.__tree.items())

    def to_raw(self, *, delimiter: str = '=', blank_lines: int = 1) -> str:
        """Render back to INI text, keeping raw values untouched.

        Nodes of the "" header come first, without a header line.
        Nothing is written to disk. Headers, names or values that would
        not read back the same are reported with a `UserWarning`.
        """
        if '=' not in delimiter:
            warn(f'delimiter {delimiter!r} has no "=", '
                 'nodes would not read back.', stacklevel=2)
        for name, nodes in self.__tree.items():
            if name and _unreadable_header(name):
                warn(f'header {name!r} would not read back the same.',
                     stacklevel=2)
            for i in nodes:
                if part := _unreadable_node(i):
                    warn(f'{part} of node {i.name!r} '
                         'would not read back the same.', stacklevel=2)

        chunks: list[str] = []
        if '' in self.__tree:
            chunks.append(self.__section_lines(self.__tree[''], delimiter))
        for name, nodes in self.__tree.items():
            if name == '':
                continue
            body = self.__section_lines(nodes, delimiter)
            chunks.append(f'{Header(name)}\n{body}' if body else
                          str(Header(name)))
        if not chunks:
            return ''
        return ('\n' * (blank_lines + 1)).join(chunks) + '\n'

    @staticmethod
    def __section_lines(nodes: list[Node], delimiter: str) -> str:
        return '\n'.join(f'{i.name}{delimiter}{i.raw_value}' for i in nodes)

    def __str__(self) -> str:
        return self.to_raw()
