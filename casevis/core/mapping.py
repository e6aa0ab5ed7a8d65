"""
CaseVis Term Mapping Table
Static mapping of clinical term patterns to body-region highlights on the 3D model
"""

import re
import yaml
from typing import List, Optional, Tuple, Pattern, Dict, Any
from dataclasses import dataclass
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# Embedded term table. organ_name must be a substring of a mesh name in the body model.
MAPPINGS_YAML = """
- pattern: "abdominal pain"
  highlights:
    - organ: "06_Abdomen"
      color: "#FF6347"
      description: "Abdominal Pain (Abdomen)"
    - organ: "07_Lower_abdomen"
      color: "#FF6347"
      description: "Abdominal Pain (Lower Abdomen)"

- pattern: "large bowel obstruction|cecal volvulus"
  highlights:
    - organ: "06_Abdomen"
      color: "#FFA500"
      description: "Bowel Obstruction (Abdomen Area)"
    - organ: "07_Lower_abdomen"
      color: "#FFA500"
      description: "Bowel Obstruction (Lower Abdomen Area)"

- pattern: "necrotic gut"
  highlights:
    - organ: "06_Abdomen"
      color: "#8B0000"
      description: "Necrotic Gut (Abdomen Area)"
    - organ: "07_Lower_abdomen"
      color: "#8B0000"
      description: "Necrotic Gut (Lower Abdomen Area)"

- pattern: "respiratory distress"
  highlights:
    - organ: "05_Chest"
      color: "#1E90FF"
      description: "Respiratory Distress (Chest Area)"

- pattern: "right nephrectomy"
  highlights:
    - organ: "21_Lower_back"
      color: "#A9A9A9"
      description: "Right Nephrectomy (Lower Back/Kidney Area)"

- pattern: "headache"
  highlights:
    - organ: "01_Scalp"
      color: "#FFEB3B"
      description: "Headache (Scalp)"
    - organ: "SA_01_FOREHEAD"
      color: "#FFEB3B"
      description: "Headache (Forehead)"
    - organ: "SA_02_TEMPLES"
      color: "#FFEB3B"
      description: "Headache (Temples)"

- pattern: "facial injury|face trauma"
  highlights:
    - organ: "02_Face"
      color: "#E91E63"
      description: "Facial Injury"
    - organ: "SA_10_CHEEKS"
      color: "#E91E63"
      description: "Facial Injury (Cheeks)"
    - organ: "SA_13_JAW"
      color: "#E91E63"
      description: "Facial Injury (Jaw)"

- pattern: "arm injury"
  highlights:
    - organ: "10_Upper_arms"
      color: "#9C27B0"
      description: "Arm Injury (Upper Arms)"
    - organ: "12_Fore_arms"
      color: "#9C27B0"
      description: "Arm Injury (Forearms)"
    - organ: "11_Elbows"
      color: "#9C27B0"
      description: "Arm Injury (Elbows)"
    - organ: "13_Hand_back"
      color: "#9C27B0"
      description: "Arm Injury (Back of Hand)"
    - organ: "14_Hand_palms"
      color: "#9C27B0"
      description: "Arm Injury (Palm of Hand)"

- pattern: "leg pain|leg injury"
  highlights:
    - organ: "15_Thighs"
      color: "#00BCD4"
      description: "Leg Issue (Thighs)"
    - organ: "17_Legs"
      color: "#00BCD4"
      description: "Leg Issue (Lower Legs)"
    - organ: "16_Knees"
      color: "#00BCD4"
      description: "Leg Issue (Knees)"

- pattern: "back pain"
  highlights:
    - organ: "20_Back"
      color: "#4CAF50"
      description: "Back Pain (Upper/Mid Back)"
    - organ: "21_Lower_back"
      color: "#4CAF50"
      description: "Back Pain (Lower Back)"
"""

_HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')


@dataclass(frozen=True)
class OrganHighlight:
    """How to mark one body-region mesh on the model"""
    organ_name: str
    color: str
    description: Optional[str] = None


@dataclass(frozen=True)
class MedicalTermMapping:
    """A case-insensitive term pattern and the highlights it triggers"""
    term_pattern: Pattern
    highlights: Tuple[OrganHighlight, ...]

    def matches(self, text: str) -> bool:
        return self.term_pattern.search(text) is not None


def _parse_highlight(entry: Dict[str, Any], source: str) -> OrganHighlight:
    try:
        organ = entry['organ']
        color = entry['color']
    except (KeyError, TypeError):
        raise ValueError(f"Highlight entry in {source} needs 'organ' and 'color': {entry!r}")

    if not isinstance(organ, str) or not organ:
        raise ValueError(f"Organ name in {source} must be a non-empty string: {organ!r}")
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        raise ValueError(f"Invalid hex color {color!r} for organ {organ!r} in {source}")

    description = entry.get('description')
    if description is not None and not isinstance(description, str):
        raise ValueError(f"Description for organ {organ!r} in {source} must be a string")

    return OrganHighlight(organ_name=organ, color=color, description=description)


def parse_mappings(yaml_text: str, source: str = "<embedded>") -> List[MedicalTermMapping]:
    """
    Build the mapping table from its YAML form

    Args:
        yaml_text: YAML list of {pattern, highlights} records
        source: Name used in error messages

    Returns:
        Mappings in authoring order
    """
    try:
        records = yaml.safe_load(yaml_text) or []
    except yaml.YAMLError as e:
        raise ValueError(f"Mapping table in {source} is not valid YAML: {e}")
    if not isinstance(records, list):
        raise ValueError(f"Mapping table in {source} must be a list of records")

    mappings = []
    for record in records:
        if not isinstance(record, dict) or not isinstance(record.get('pattern'), str):
            raise ValueError(f"Mapping record in {source} needs a 'pattern' string: {record!r}")

        try:
            pattern = re.compile(record['pattern'], re.IGNORECASE)
        except re.error as e:
            raise ValueError(f"Invalid term pattern {record['pattern']!r} in {source}: {e}")

        entries = record.get('highlights') or []
        if not isinstance(entries, list):
            raise ValueError(f"'highlights' for pattern {record['pattern']!r} in {source} must be a list")
        highlights = tuple(_parse_highlight(h, source) for h in entries)
        mappings.append(MedicalTermMapping(term_pattern=pattern, highlights=highlights))

    logger.info(f"Loaded {len(mappings)} term mappings from {source}")
    return mappings


def load_mappings(path: Optional[str] = None) -> List[MedicalTermMapping]:
    """Load the mapping table from a YAML file, or the embedded table when no path is given"""
    if path is None:
        return list(DEFAULT_MAPPINGS)

    try:
        yaml_text = Path(path).read_text(encoding='utf-8')
    except OSError as e:
        raise ValueError(f"Failed to read mapping table from {path}: {e}")

    return parse_mappings(yaml_text, source=str(path))


def all_organ_names(mappings: Optional[List[MedicalTermMapping]] = None) -> List[str]:
    """Distinct organ names referenced anywhere in the table, in table order"""
    if mappings is None:
        mappings = DEFAULT_MAPPINGS

    names = []
    for mapping in mappings:
        for highlight in mapping.highlights:
            if highlight.organ_name not in names:
                names.append(highlight.organ_name)
    return names


DEFAULT_MAPPINGS: Tuple[MedicalTermMapping, ...] = tuple(parse_mappings(MAPPINGS_YAML))
