"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filter.py
Eligibility filter: decides whether a directory entry takes part in comparison
based on its size, extension and name.
"""

import logging
from typing import List, Sequence

from dupehash.core.interfaces import FileFilter
from dupehash.core.models import DirectoryEntry, EligibilityCriteria

logger = logging.getLogger(__name__)


def is_eligible(entry: DirectoryEntry, criteria: EligibilityCriteria) -> bool:
    """
    Pure predicate over one entry's metadata and name.

    Entries whose metadata cannot be read are not eligible; the failure is
    never raised so one unreadable node cannot abort a traversal.
    """
    try:
        size = entry.stat().st_size
    except OSError as e:
        logger.debug(f"Metadata unavailable for {entry.path}: {e}")
        return False

    if not criteria.min_size <= size <= criteria.max_size:
        return False

    if criteria.allowed_extensions is not None and entry.extension not in criteria.allowed_extensions:
        return False

    return criteria.name_pattern.search(entry.name) is not None


class EligibilityFilterImpl(FileFilter):
    """Applies is_eligible() with one shared, read-only criteria object."""

    def __init__(self, criteria: EligibilityCriteria):
        self.criteria = criteria

    def filter(self, entries: Sequence[DirectoryEntry]) -> List[DirectoryEntry]:
        eligible = [entry for entry in entries if is_eligible(entry, self.criteria)]
        logger.debug(f"{len(eligible)} of {len(entries)} entries eligible")
        return eligible
