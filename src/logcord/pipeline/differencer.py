"""Set difference and count helpers used when describing message changes."""

from __future__ import annotations

from typing import Hashable, Iterable

from logcord.datatypes.log_datatypes import AttachmentDiff


def asymmetric_diff(before: Iterable[Hashable], after: Iterable[Hashable]) -> AttachmentDiff:
    """
    Compare two collections as sets.

    ``removed`` holds what is only in ``before``; ``added`` holds what is only
    in ``after``. Order and duplicates in the inputs do not matter.
    """
    before_set = frozenset(before)
    after_set = frozenset(after)
    return AttachmentDiff(added=after_set - before_set, removed=before_set - after_set)


def pluralize(singular: str, plural: str, count: int) -> str:
    # zero takes the plural form ("0 attachments")
    return singular if count == 1 else plural


def count_noun(count: int, singular: str, plural: str | None = None) -> str:
    """Render ``count`` with the matching noun form, e.g. ``"2 attachments"``."""
    return f"{count} {pluralize(singular, plural or f'{singular}s', count)}"
