"""Run-scoped substitution table for text values.

Every distinct original string gets a random alphanumeric replacement of the
same length. The same original always maps to the same replacement for the
lifetime of the table, so values shared between rows or tables (a bookmark
title equal to a page title, a host repeated across visits) stay equal after
anonymization while their content is lost.

Collision handling is bounded: a candidate that is already used as a
replacement is regenerated up to ``MAX_ATTEMPTS - 1`` times and the last
candidate is accepted unconditionally. Distinct inputs therefore collide only
with negligible probability, never with a hard guarantee.
"""

from __future__ import annotations

import secrets
import string
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import ClassVar

from anonymize_places.logging.logger import Log

_ALPHABET = string.ascii_letters + string.digits


def random_alphanumeric(length: int) -> str:
    """Return a uniformly random ``[A-Za-z0-9]`` string of *length* chars."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


class SubstitutionTable:
    """Consistent, length-preserving original -> replacement mapping.

    Safe to share between threads: lookup, generation, collision check and
    insertion happen under a single lock.
    """

    MAX_ATTEMPTS: ClassVar[int] = 10

    def __init__(
        self,
        candidate_factory: Callable[[int], str] = random_alphanumeric,
    ) -> None:
        self._candidate_factory = candidate_factory
        self._entries: dict[str, str] = {}
        self._replacements: set[str] = set()
        self._forced_acceptances = 0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def anonymize(self, original: str) -> str:
        """Return the replacement for *original*, creating it on first use.

        The empty string maps to itself and is never stored.
        """
        if not original:
            return ""

        with self._lock:
            existing = self._entries.get(original)
            if existing is not None:
                return existing

            replacement = self._generate(len(original))
            self._entries[original] = replacement
            self._replacements.add(replacement)
            return replacement

    @property
    def entries(self) -> Mapping[str, str]:
        """Read-only view of the current mapping."""
        return MappingProxyType(self._entries)

    @property
    def forced_acceptances(self) -> int:
        return self._forced_acceptances

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, original: object) -> bool:
        return original in self._entries

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _generate(self, length: int) -> str:
        """Pick a candidate not yet used as a replacement, if possible.

        Must be called with the lock held.
        """
        candidate = ""
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            candidate = self._candidate_factory(length)
            if candidate not in self._replacements:
                return candidate
            Log.debug(f"Replacement collision on attempt {attempt} (length {length})")

        self._forced_acceptances += 1
        Log.warning(
            f"Accepting colliding replacement after {self.MAX_ATTEMPTS} attempts "
            f"(length {length})"
        )
        return candidate
