"""
CaseVis Streamlit Components
Bidirectional frontends for the 3D model viewer and the clickable discharge summary
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import streamlit.components.v1 as components

from ..core.annotate import annotate_text

_FRONTEND_DIR = Path(__file__).parent

_model_viewer = components.declare_component("casevis_model_viewer", path=str(_FRONTEND_DIR / "model_viewer"))
_summary_view = components.declare_component("casevis_summary_view", path=str(_FRONTEND_DIR / "summary_view"))


def model_viewer(glb_base64: str,
                 height: int = 600,
                 camera_position: Sequence[float] = (0.0, 1.5, 200.0),
                 camera_fov: float = 45.0,
                 background: str = "#282c34",
                 key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Render the body model with orbit controls

    Returns:
        {"mesh": name, "nonce": n} for the latest mesh click, or None
    """
    return _model_viewer(
        glb=glb_base64,
        height=height,
        camera_position=list(camera_position),
        camera_fov=camera_fov,
        background=background,
        key=key,
        default=None,
    )


def summary_view(points: Sequence[str],
                 phrases: Sequence[str],
                 intro: str = "",
                 key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Render summary points with clickable phrases

    Points are segmented on the Python side; the frontend only draws the runs.

    Returns:
        {"phrase": text, "nonce": n} for the latest phrase click, or None
    """
    segmented: List[List[Dict[str, Any]]] = [
        [segment.to_dict() for segment in annotate_text(point, phrases)]
        for point in points
    ]
    return _summary_view(points=segmented, intro=intro, key=key, default=None)
