"""Decoding helpers for values read back from persisted columns."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def try_read_string(raw: object) -> str | None:
    """Return ``raw`` when the storage layer produced a string, otherwise None.

    Absent values (``None``) are expected for partial projections and nullable
    columns. Any other type is ignored as well but logged, since it usually
    means the column is mapped to the wrong type.
    """

    if isinstance(raw, str):
        return raw
    if raw is not None:
        logger.warning("storage_value_ignored type=%s", type(raw).__name__)
    return None
