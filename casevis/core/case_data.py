"""
CaseVis Case Data
The clinical note and discharge summary shown by the visualizer
"""

import yaml
from typing import List, Optional
from dataclasses import dataclass, field
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# Embedded demo case (de-identified discharge note)
CASE_YAML = """
title: "Medical Case Visualizer"
notes: |
  Attending:First Name (LF) 301
  Chief Complaint:
  Abdominal pain
  Major Surgical or Invasive Procedure:
  Exploratory laparotomy, right nephrectomy
  History of Present Illness:
  Mr Known lastname 65533 is a Age over 90 year old man s/p right nephrectomy, s/p left
  ureterostomy ileal conduit who was transferred from Hospital1 18
  Location (un) 620 for sharp and worsening abdominal pain. The patient
  denied any bowel movement in the 2-3 days prior to presentation
  but had some flatus in the previous hour. A CT scan performed at
  Location (un) 620 was concerning for large bowel obstruction/cecal
  volvulus. He also reported symptoms of respiratory distress.
  Past Medical History:
  PMH: CAD, MI, HTN, DJD, renal CA, a-fib
  PSH: CCY, R nephrectomy, cystectomy/ileal conduit, AAA,
  pacemaker, PTCA. He also had a history of necrotic gut requiring intervention.
  Social History:
  No tobacco, occasional wine. Other underlying conditions were noted.
  Family History:
  Non-contributory
  Physical Exam:
  Temp 97.2 72 170/76 24
  Gen: sitting up
  Post-operative course included complications such as coagulopathy, hypoglycemia, and respiratory distress requiring intubation and readmission to the SICU.
  Patient eventually recovered and was discharged to an extended care facility for rehabilitation.
  Discharge medications included pain medications, anticoagulants.
  Follow-up instructions included wound care, activity restrictions, and close follow-up with his surgeon.
  Revision of ileal conduit was also performed.
summary_intro: >-
  Here is a chronological summary of the Discharge Summary in 100-150 words with up to
  10 bullet points, including references to bowel obstruction, bowel, ischemia, ascites,
  and perforation:
summary_points:
  - "Patient, a Age over 90 year old man, presented with sharp and worsening abdominal pain and no bowel movement for 2-3 days."
  - "CT scan showed large bowel obstruction/cecal volvulus."
  - "Underwent exploratory laparotomy, right colectomy, and revision of ileal conduit on 2122-2-13."
  - "Intraoperatively, patient was found to have necrotic gut and underwent right colectomy."
  - "Postoperatively, patient had several complications, including coagulopathy, hypoglycemia, and respiratory distress, requiring intubation and readmission to the SICU."
  - "Patient eventually recovered and was discharged to an extended care facility for rehabilitation on 2122-3-3."
  - "Discharge medications included pain medications, anticoagulants, and other medications to manage his underlying conditions."
  - "Follow-up instructions included wound care, activity restrictions, and close follow-up with his surgeon."
"""


@dataclass
class MedicalCase:
    """A clinical note and its discharge summary"""
    notes: str
    summary_points: List[str] = field(default_factory=list)
    summary_intro: str = ""
    title: str = "Medical Case Visualizer"


def parse_case(yaml_text: str, source: str = "<embedded>") -> MedicalCase:
    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        raise ValueError(f"Case data in {source} is not valid YAML: {e}")
    if not isinstance(data, dict) or not isinstance(data.get('notes'), str):
        raise ValueError(f"Case data in {source} needs a 'notes' string")

    points = data.get('summary_points') or []
    if not isinstance(points, list) or not all(isinstance(p, str) for p in points):
        raise ValueError(f"'summary_points' in {source} must be a list of strings")

    for field in ('summary_intro', 'title'):
        if data.get(field) is not None and not isinstance(data[field], str):
            raise ValueError(f"'{field}' in {source} must be a string")

    case = MedicalCase(
        notes=data['notes'],
        summary_points=points,
        summary_intro=data.get('summary_intro') or "",
        title=data.get('title') or MedicalCase.title,
    )
    logger.info(f"Loaded case from {source} with {len(points)} summary points")
    return case


def load_case(path: Optional[str] = None) -> MedicalCase:
    """Load a case from a YAML file, or the embedded demo case when no path is given"""
    if path is None:
        return parse_case(CASE_YAML)

    try:
        yaml_text = Path(path).read_text(encoding='utf-8')
    except OSError as e:
        raise ValueError(f"Failed to read case file {path}: {e}")

    return parse_case(yaml_text, source=str(path))
