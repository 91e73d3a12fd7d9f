from __future__ import annotations

"""Placeholder markup used inside rendered condition/description text.

Renderers never emit raw control characters; they emit the ``--XX--`` tokens
below and :func:`convert` turns them into their display form right before
output.  Tokens are mutually exclusive substrings so the substitution order
does not matter.
"""

from typing import Dict, List, Tuple

__all__ = [
    "LINE_BREAK",
    "TAB",
    "BOLD_ON",
    "BOLD_OFF",
    "ITALIC_ON",
    "ITALIC_OFF",
    "UNDERLINE_ON",
    "UNDERLINE_OFF",
    "CHECKED",
    "UNCHECKED",
    "BULLET",
    "convert",
]

LINE_BREAK = "--BR--"
TAB = "--TAB--"
BOLD_ON, BOLD_OFF = "--B--", "--/B--"
ITALIC_ON, ITALIC_OFF = "--I--", "--/I--"
UNDERLINE_ON, UNDERLINE_OFF = "--U--", "--/U--"
CHECKED = "--CHECKED--"
UNCHECKED = "--UNCHECKED--"
BULLET = "--BULLET--"

# ANSI SGR sequences; the "off" codes only reset their own attribute.
_EMPHASIS: Dict[str, str] = {
    BOLD_ON: "\x1b[1m",
    BOLD_OFF: "\x1b[22m",
    ITALIC_ON: "\x1b[3m",
    ITALIC_OFF: "\x1b[23m",
    UNDERLINE_ON: "\x1b[4m",
    UNDERLINE_OFF: "\x1b[24m",
}

_LAYOUT: List[Tuple[str, str]] = [
    (LINE_BREAK, "\n"),
    (TAB, "\t"),
    (CHECKED, "[X]"),
    (UNCHECKED, "[ ]"),
    (BULLET, "-"),
]


def convert(text: str, *, plain: bool = False) -> str:  # noqa: D401
    """Return *text* with every placeholder replaced.

    With ``plain=True`` emphasis tokens are dropped instead of being turned
    into terminal escape codes (used for files read outside a terminal).
    """
    if not text:
        return ""
    for token, repl in _LAYOUT:
        text = text.replace(token, repl)
    for token, code in _EMPHASIS.items():
        text = text.replace(token, "" if plain else code)
    return text
