"""Field-name casing rules for structured error keys.

Error maps are keyed by lowerCamelCase field names and every message is
prefixed with the field rendered in Start Case::

    >>> camel_case("first_name")
    'firstName'
    >>> start_case("firstName")
    'First Name'

Word splitting follows the same boundaries as lodash ``_.words``: any
non-alphanumeric separator, lower-to-upper transitions, the end of an
acronym (``HTTPServer`` -> ``HTTP``, ``Server``), and digit runs.
"""

from __future__ import annotations

import re

# Alphanumeric runs in any script; split further by letter case.
_RUN_RE = re.compile(r"[^\W_]+")
_SHAPE_RE = re.compile(r"A+(?!a)|A?a+|0+")


def _shape(char: str) -> str:
    if char.isdigit():
        return "0"
    if char.isupper() or char.istitle():
        return "A"
    return "a"


def words(text: str) -> list[str]:
    """Split *text* into its component words.

    Case boundaries use Unicode letter case, so ``naïveField`` splits
    into ``naïve`` and ``Field``.
    """
    found: list[str] = []
    for run in _RUN_RE.finditer(text):
        chunk = run.group()
        shape = "".join(_shape(c) for c in chunk)
        found += [chunk[m.start() : m.end()] for m in _SHAPE_RE.finditer(shape)]
    return found


def _upper_first(word: str) -> str:
    return word[:1].upper() + word[1:]


def camel_case(text: str) -> str:
    """Render *text* as lowerCamelCase.

    Examples:
        >>> camel_case("Field One")
        'fieldOne'
        >>> camel_case("HTTPServer")
        'httpServer'
    """
    parts = [w.lower() for w in words(text)]
    if not parts:
        return ""
    return parts[0] + "".join(_upper_first(p) for p in parts[1:])


def start_case(text: str) -> str:
    """Render *text* as space-separated Start Case, keeping inner capitals."""
    return " ".join(_upper_first(w) for w in words(text))


def is_camel_case(field: str) -> bool:
    """True when *field* is non-empty and already in canonical lowerCamelCase."""
    return bool(field) and field == camel_case(field)
