# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2026/10/18 14:05:37

"""Failures raised while parsing INI text or converting node values.

Every error is raised at the point of failure, nothing gets skipped or
recovered. Each one keeps the offending text in `.raw` when there is one.
"""


class IniError(Exception):
    """Base of every error raised by `typedini`."""

    def __init__(self, raw: str | None = None) -> None:
        super().__init__(raw)
        self.raw = raw

    def __str__(self) -> str:
        if self.raw is None:
            return type(self).__name__
        return f'{type(self).__name__}: {self.raw!r}'


class MalformedNode(IniError):
    """A node line has no `=` delimiter."""
    pass


class MalformedHeader(IniError):
    """A header line misses its `[` or `]`."""
    pass


class EmptyNodeValue(IniError):
    """The requested value is empty after trimming."""
    pass


class InvalidNodeValue(IniError, ValueError):
    """A deserializer cannot make sense of the node value."""
    pass


class CastNotAllowed(IniError, TypeError):
    def __init__(self, deserializer: type, target: type) -> None:
        super().__init__(None)
        self.deserializer = deserializer
        self.target = target

    def __str__(self) -> str:
        return (f'{self.deserializer.__name__} does not allow casting '
                f'to {self.target.__name__}.')


class NoConverterFound(IniError, TypeError):
    def __init__(self, type_: type) -> None:
        super().__init__(None)
        self.type = type_

    def __str__(self) -> str:
        return f'no converter registered for {self.type.__name__}.'


# a KeyError too, like any missing mapping key.
class HeaderNotFound(IniError, KeyError):
    def __str__(self) -> str:
        return f'no nodes recorded under header [{self.raw}].'
