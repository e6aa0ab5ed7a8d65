"""
CaseVis Highlight Extraction
Scans clinical text against the term mapping table
"""

from typing import List, Optional, Sequence, Set, Tuple
import logging

from .mapping import DEFAULT_MAPPINGS, MedicalTermMapping, OrganHighlight

logger = logging.getLogger(__name__)


def extract_organ_highlights(text: str,
                             mappings: Optional[Sequence[MedicalTermMapping]] = None) -> List[OrganHighlight]:
    """
    Collect highlights for every mapping whose pattern occurs in the text

    Args:
        text: Clinical note or any other free text
        mappings: Term table (defaults to the embedded table)

    Returns:
        Highlights in table order, each (organ_name, color) pair at most once
    """
    if mappings is None:
        mappings = DEFAULT_MAPPINGS

    highlights = []
    seen: Set[Tuple[str, str]] = set()

    for mapping in mappings:
        if not mapping.matches(text):
            continue

        logger.debug(f"Term pattern '{mapping.term_pattern.pattern}' matched")
        for highlight in mapping.highlights:
            key = (highlight.organ_name, highlight.color)
            if key not in seen:
                seen.add(key)
                highlights.append(highlight)

    logger.info(f"Extracted {len(highlights)} organ highlights")
    return highlights
