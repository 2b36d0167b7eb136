# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/18 16:02:30

from .errors import (
    IniError,
    MalformedNode,
    MalformedHeader,
    EmptyNodeValue,
    InvalidNodeValue,
    CastNotAllowed,
    NoConverterFound,
    HeaderNotFound
)
from .model import Node, Header, Structure
from .parser import IniReader, ReaderOptions, load, loads
from .serde import *  # noqa: F401,F403
from .serde import __all__ as _serde_all
from .text import trim

__all__ = [
    'IniError', 'MalformedNode', 'MalformedHeader', 'EmptyNodeValue',
    'InvalidNodeValue', 'CastNotAllowed', 'NoConverterFound',
    'HeaderNotFound',
    'Node', 'Header', 'Structure',
    'IniReader', 'ReaderOptions', 'load', 'loads',
    'trim',
    *_serde_all
]
