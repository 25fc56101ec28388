"""Revision naming for saved projects and designs.

Saved names carry a ``(revN)`` suffix, e.g. ``"Lobby Panels (rev2)"``.
Two helpers compute names:

- ``next_revision_name`` bumps the suffix of a single known name. A name
  without a suffix is treated as an implicit rev0, so the next one is rev1.
- ``allocate_revision_name`` scans every existing name that shares a base
  and returns ``max(N) + 1``. When nothing matches, the first name is rev0.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

_SUFFIX_PATTERN = re.compile(r"^(?P<base>.*?)\s*\(rev(?P<rev>\d+)\)\s*$", re.IGNORECASE)


def format_revision_name(base: str, revision: int) -> str:
    """Build ``"<base> (rev<N>)"``."""
    return f"{base} (rev{revision})"


def parse_revision(name: str) -> tuple[str, int | None]:
    """Split a name into its base and revision number.

    Examples:
        >>> parse_revision("Lobby (rev3)")
        ('Lobby', 3)
        >>> parse_revision("Lobby")
        ('Lobby', None)
    """
    match = _SUFFIX_PATTERN.match(name)
    if match is None:
        return name.strip(), None
    return match.group("base").strip(), int(match.group("rev"))


def strip_revision(name: str) -> str:
    """Return the name without its ``(revN)`` suffix."""
    return parse_revision(name)[0]


def next_revision_name(name: str) -> str:
    """Return the revision that follows a single name.

    Examples:
        >>> next_revision_name("Lobby (rev1)")
        'Lobby (rev2)'
        >>> next_revision_name("Lobby")
        'Lobby (rev1)'
    """
    base, revision = parse_revision(name)
    return format_revision_name(base, 1 if revision is None else revision + 1)


def highest_revision(base: str, existing_names: Iterable[str]) -> int | None:
    """Find the highest revision used by names sharing ``base``.

    An exact, unsuffixed ``base`` counts as rev0. Matching is
    case-insensitive. Returns None if no name shares the base.
    """
    pattern = re.compile(
        rf"^{re.escape(base.strip())}(?:\s*\(rev(\d+)\))?$", re.IGNORECASE
    )
    highest: int | None = None
    for name in existing_names:
        match = pattern.match(name.strip())
        if match is None:
            continue
        revision = 0 if match.group(1) is None else int(match.group(1))
        if highest is None or revision > highest:
            highest = revision
    return highest


def allocate_revision_name(base: str, existing_names: Iterable[str]) -> str:
    """Allocate the next free revision name for a base name.

    Args:
        base: Base name; a ``(revN)`` suffix on it is ignored.
        existing_names: Names already saved in the same scope.

    Returns:
        ``"<base> (rev0)"`` when no name shares the base, otherwise the
        highest revision plus one.

    Examples:
        >>> allocate_revision_name("X", ["X (rev0)", "X (rev1)"])
        'X (rev2)'
        >>> allocate_revision_name("Foo", [])
        'Foo (rev0)'
    """
    clean_base = strip_revision(base)
    highest = highest_revision(clean_base, existing_names)
    return format_revision_name(clean_base, 0 if highest is None else highest + 1)


class RevisionAllocator:
    """Serialises revision allocation per scope and base name.

    Allocation is read-then-write against the store. Holding the lock for
    ``(scope, base)`` across the read and the insert keeps two concurrent
    saves handled by this process from claiming the same number. A key is
    forgotten once nobody holds or waits for it.

    Example:
        >>> allocator = RevisionAllocator()
        >>> async def save():
        ...     async with allocator.lock("project-1", "Lobby"):
        ...         names = await load_names()
        ...         await insert(allocate_revision_name("Lobby", names))
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._users: dict[tuple[str, str], int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def lock(self, scope: str, base: str) -> AsyncIterator[None]:
        key = (scope, strip_revision(base).lower())
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]
