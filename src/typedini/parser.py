# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2026/10/18 15:44:58

"""Turning files and streams into `Structure`s.

The parsing itself lives in `Structure.from_raw`, this module only gets the
text there. Read only: documents are never written back to disk.
"""

import logging
from dataclasses import dataclass
from io import TextIOBase
from os import PathLike

import chardet

from .abstract import FileReader
from .model import Structure

__all__ = ['ReaderOptions', 'IniReader', 'load', 'loads']

logger = logging.getLogger(__name__)


@dataclass(kw_only=True, frozen=True)
class ReaderOptions:
    """How `IniReader` guesses the codec of undecodable files."""
    # below this, the chardet guess is ignored.
    min_confidence: float = 0.8
    fallback_encoding: str = 'utf-8'
    last_resort_encoding: str = 'gbk'


class IniReader(FileReader[Structure]):
    def __init__(
        self,
        filename: str | PathLike[str],
        encoding: str | None = None,
        options: ReaderOptions | None = None
    ) -> None:
        super().__init__(filename)
        self._codec = encoding
        self._options = options or ReaderOptions()

    @staticmethod
    def readstream(buf: TextIOBase) -> Structure:
        """Parse an already decoded text stream, read to its end."""
        return Structure.from_raw(buf.read())

    def _decode_file(self) -> str:
        with open(self._fn, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        encoding = codec.get('encoding')
        confidence = codec.get('confidence') or 0.0
        if encoding is None or confidence < self._options.min_confidence:
            logger.warning(
                'unsure about the encoding of %s (%s, %.2f), trying %s.',
                self._fn, encoding, confidence,
                self._options.fallback_encoding)
            encoding = self._options.fallback_encoding
        else:
            logger.debug('%s detected as %s.', self._fn, encoding)

        # fallbacks
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.warning('%s is not %s, decoding as %s.', self._fn,
                           encoding, self._options.last_resort_encoding)
            return raw.decode(self._options.last_resort_encoding)

    def read(self) -> Structure:
        """读取`IniReader`实例指定的文件。

        先按`encoding`（为`None`时即系统默认编码）打开；
        解码失败时改用`chardet`猜测编码。
        """
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return self.readstream(fp)
        except UnicodeDecodeError:
            logger.debug('%s is not %s, guessing its codec.',
                         self._fn, self._codec or 'the default encoding')
            return Structure.from_raw(self._decode_file())
        except OSError as e:
            logger.warning('unable to read %s: %s', self._fn, e)
            raise

    def __str__(self) -> str:
        return 'INI file: ' + super().__str__() + f' ({self._codec})'


def loads(text: str) -> Structure:
    return Structure.from_raw(text)


def load(
    filename: str | PathLike[str],
    encoding: str | None = None,
    options: ReaderOptions | None = None
) -> Structure:
    return IniReader(filename, encoding, options).read()
