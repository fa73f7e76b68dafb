"""Maven version ordering — ``ComparableVersion`` semantics.

A version string is lower-cased and split into items on ``.``, ``-`` and on
every digit/letter transition.  A ``-`` or a transition opens a nested list,
so ``1.0-rc1`` becomes ``[1, ["rc", [1]]]``.  Trailing null items (``0`` and
the empty release qualifier) are dropped, which makes ``1.0`` equal to ``1``.

Qualifier ordering::

    alpha < beta < milestone < rc (= cr) < snapshot < "" (= ga = final = release) < sp

Unknown qualifiers sort after ``sp``, lexically among themselves.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Union

_QUALIFIERS = ("alpha", "beta", "milestone", "rc", "snapshot", "", "sp")
_ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
_SHORT_QUALIFIERS = {"a": "alpha", "b": "beta", "m": "milestone"}

_RELEASE_INDEX = str(_QUALIFIERS.index(""))

Item = Union[int, str, list]


def _string_item(value: str, followed_by_digit: bool) -> str:
    if followed_by_digit and len(value) == 1:
        value = _SHORT_QUALIFIERS.get(value, value)
    return _ALIASES.get(value, value)


def _parse_item(is_digit: bool, token: str) -> Item:
    return int(token) if is_digit else _string_item(token, False)


def _comparable_qualifier(qualifier: str) -> str:
    if qualifier in _QUALIFIERS:
        return str(_QUALIFIERS.index(qualifier))
    return f"{len(_QUALIFIERS)}-{qualifier}"


def _is_null(item: Item) -> bool:
    if isinstance(item, int):
        return item == 0
    if isinstance(item, str):
        return item == ""
    return len(item) == 0


def _normalize(items: list) -> None:
    for i in range(len(items) - 1, -1, -1):
        if _is_null(items[i]):
            del items[i]
        elif not isinstance(items[i], list):
            break


def _cmp(a: int | str, b: int | str) -> int:
    return (a > b) - (a < b)


def _compare(left: Item | None, right: Item | None) -> int:
    """Compare two items; ``None`` stands for a missing item."""
    if left is None:
        return 0 if right is None else -_compare(right, None)

    if isinstance(left, int):
        if right is None:
            return 0 if left == 0 else 1
        if isinstance(right, int):
            return _cmp(left, right)
        return 1  # numbers sort after qualifiers and nested lists

    if isinstance(left, str):
        if right is None:
            return _cmp(_comparable_qualifier(left), _RELEASE_INDEX)
        if isinstance(right, int):
            return -1
        if isinstance(right, str):
            return _cmp(_comparable_qualifier(left), _comparable_qualifier(right))
        return -1

    # left is a list
    if right is None:
        return _compare(left[0], None) if left else 0
    if isinstance(right, int):
        return -1
    if isinstance(right, str):
        return 1
    for i in range(max(len(left), len(right))):
        l_item = left[i] if i < len(left) else None
        r_item = right[i] if i < len(right) else None
        result = _compare(l_item, r_item)
        if result:
            return result
    return 0


def parse_version(version: str) -> list:
    """Tokenise *version* into the nested item structure used for ordering."""
    version = version.lower()
    items: list = []
    current = items
    stack = [items]
    is_digit = False
    start = 0

    for i, char in enumerate(version):
        if char == ".":
            current.append(0 if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
        elif char == "-":
            current.append(0 if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
            nested: list = []
            current.append(nested)
            current = nested
            stack.append(nested)
        elif char.isdigit():
            if not is_digit and i > start:
                current.append(_string_item(version[start:i], True))
                start = i
                nested = []
                current.append(nested)
                current = nested
                stack.append(nested)
            is_digit = True
        else:
            if is_digit and i > start:
                current.append(int(version[start:i]))
                start = i
                nested = []
                current.append(nested)
                current = nested
                stack.append(nested)
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        _normalize(stack.pop())
    return items


@total_ordering
class MavenVersion:
    """A totally ordered Maven version.

    Examples
    --------
    >>> MavenVersion("1.0-SNAPSHOT") < MavenVersion("1.0")
    True
    >>> MavenVersion("1.10") > MavenVersion("1.9")
    True
    """

    __slots__ = ("_raw", "_items")

    def __init__(self, version: str) -> None:
        self._raw = version
        self._items = parse_version(version)

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def is_snapshot(self) -> bool:
        return self._raw.upper().endswith("-SNAPSHOT")

    def compare(self, other: MavenVersion) -> int:
        return _compare(self._items, other._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: MavenVersion) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(repr(self._items))

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"MavenVersion({self._raw!r})"
