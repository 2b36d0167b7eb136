# -*- encoding: utf-8 -*-
# @File   : text.py
# @Time   : 2026/10/18 14:02:11

WHITESPACES = ' \t\r\n'


def trim(source: str) -> str:
    """Strip spaces, tabs, CR and LF from both ends."""
    return source.strip(WHITESPACES)
