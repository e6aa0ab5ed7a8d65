"""
CaseVis Clickable Phrase Derivation
Finds the summary phrases worth making interactive
"""

import re
from typing import List, Optional, Sequence
import logging

from .mapping import DEFAULT_MAPPINGS, MedicalTermMapping, all_organ_names

logger = logging.getLogger(__name__)


def derive_clickable_phrases(summary_points: Sequence[str],
                             mappings: Optional[Sequence[MedicalTermMapping]] = None) -> List[str]:
    """
    Collect literal summary substrings that should render as clickable

    Term patterns match anywhere; organ names only as whole words.

    Args:
        summary_points: Discharge summary strings
        mappings: Term table (defaults to the embedded table)

    Returns:
        Distinct phrases with the summary's casing, in first-seen order
    """
    if mappings is None:
        mappings = DEFAULT_MAPPINGS

    phrases = {}

    for point in summary_points:
        for mapping in mappings:
            for match in mapping.term_pattern.finditer(point):
                if match.group(0):
                    phrases.setdefault(match.group(0), None)

    organ_patterns = [
        re.compile(rf'\b{re.escape(name)}\b', re.IGNORECASE)
        for name in all_organ_names(list(mappings))
    ]

    for point in summary_points:
        for pattern in organ_patterns:
            for match in pattern.finditer(point):
                phrases.setdefault(match.group(0), None)

    logger.info(f"Derived {len(phrases)} clickable phrases from {len(summary_points)} summary points")
    return list(phrases)
