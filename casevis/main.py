#!/usr/bin/env python3
"""
CaseVis Medical Case Visualizer - Streamlit UI Entry Point
Clinical notes, a clickable discharge summary and a 3D body model highlighted from the notes
"""

import streamlit as st
import streamlit.components.v1 as st_components
import copy
import html
import logging
from typing import List, Optional, Tuple

from casevis.core.config import default_config
from casevis.core.mapping import OrganHighlight, load_mappings
from casevis.core.case_data import MedicalCase, load_case
from casevis.core.extraction import extract_organ_highlights
from casevis.core.phrases import derive_clickable_phrases
from casevis.core.annotate import render_notes_html
from casevis.core.scene import ModelLoadError, SceneHighlighter
from casevis.core.state import TransientMessage, ViewerState
from casevis.components import model_viewer, summary_view

logging.basicConfig(level=getattr(logging, default_config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="Medical Case Visualizer",
    page_icon="🩺",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .stApp {
        background-color: #f4f7f6;
        font-family: Arial, sans-serif;
    }

    .main .block-container {
        max-width: 1800px;
        padding-top: 1.5rem;
    }

    .main h1 {
        text-align: center;
        color: #333;
    }

    .main h2, .main h3 {
        color: #1a237e;
    }

    /* Highlight legend in the sidebar */
    .swatch {
        display: inline-block;
        width: 14px;
        height: 14px;
        border-radius: 3px;
        margin-right: 8px;
        vertical-align: middle;
        border: 1px solid rgba(0,0,0,0.2);
    }

    .organ-item {
        font-size: 14px;
        margin-bottom: 6px;
    }

    .organ-name {
        font-family: monospace;
        color: #6b7280;
        font-size: 12px;
    }

    /* Clicked organ message */
    .organ-message {
        background-color: rgba(0,0,0,0.7);
        color: white;
        padding: 8px 12px;
        border-radius: 5px;
        font-size: 0.9em;
        display: inline-block;
        margin-bottom: 8px;
    }
</style>
""", unsafe_allow_html=True)

# Initialize session state with proper defaults
if 'viewer_state' not in st.session_state:
    st.session_state.viewer_state = ViewerState(
        organ_message=TransientMessage(timeout=default_config.viewer.message_timeout)
    )


@st.cache_data(show_spinner=False)
def analyze_case(case_file: Optional[str],
                 mappings_file: Optional[str]) -> Tuple[MedicalCase, Tuple[OrganHighlight, ...], List[str]]:
    """Load the case and derive highlights and clickable phrases once per input change"""
    mappings = load_mappings(mappings_file)
    case = load_case(case_file)
    highlights = tuple(extract_organ_highlights(case.notes, mappings))
    phrases = derive_clickable_phrases(case.summary_points, mappings)
    return case, highlights, phrases


@st.cache_resource(show_spinner="Loading 3D Model...")
def load_base_model(model_path: str):
    """Parsed model shared by all sessions; never mutated directly"""
    return SceneHighlighter.load_model(model_path).gltf


@st.cache_data(show_spinner=False)
def render_model(model_path: str, highlights: Tuple[OrganHighlight, ...],
                 emissive_intensity: float) -> Tuple[str, List[str]]:
    """Highlighted copy of the model as base64 GLB, plus the recolored mesh names"""
    highlighter = SceneHighlighter(
        copy.deepcopy(load_base_model(model_path)),
        source=model_path,
        emissive_intensity=emissive_intensity
    )
    recolored = highlighter.apply(highlights)
    return highlighter.to_base64(), recolored


try:
    case, organ_highlights, clickable_phrases = analyze_case(
        default_config.case_file, default_config.mappings_file
    )
except ValueError as e:
    st.error(f"Failed to load case data: {str(e)}")
    st.stop()

viewer_state: ViewerState = st.session_state.viewer_state

# Sidebar
with st.sidebar:
    st.markdown("## 🩺 Case Overview")
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Highlights", len(organ_highlights))
    with col2:
        st.metric("Phrases", len(clickable_phrases))

    st.divider()
    st.markdown("### 🫀 Detected Regions")
    if not organ_highlights:
        st.caption("No mapped clinical terms found in the notes.")
    for highlight in organ_highlights:
        st.markdown(
            f'<div class="organ-item">'
            f'<span class="swatch" style="background-color: {highlight.color};"></span>'
            f'{html.escape(highlight.description or highlight.organ_name)} '
            f'<span class="organ-name">{html.escape(highlight.organ_name)}</span>'
            f'</div>',
            unsafe_allow_html=True
        )

st.title(case.title)

col_notes, col_summary = st.columns(2, gap="medium")

# The summary is drawn first so a click in this run already reaches the notes view
with col_summary:
    st.subheader("Discharge Summary")
    phrase_event = summary_view(
        case.summary_points, clickable_phrases, intro=case.summary_intro, key="summary_view"
    )
    viewer_state.accept_phrase_click(phrase_event)

if viewer_state.request.phrase:
    with st.sidebar:
        st.divider()
        st.caption(f'Locating in notes: "{viewer_state.request.phrase}"')

with col_notes:
    st.subheader("Notes Summary")
    st_components.html(
        render_notes_html(
            case.notes,
            phrase=viewer_state.request.phrase,
            version=viewer_state.request.version,
            height=default_config.text.notes_height,
            mark_color=default_config.text.mark_color
        ),
        height=default_config.text.notes_height + 20
    )

st.divider()
st.markdown("<h2 style='text-align: center;'>3D Patient Model Visualization</h2>", unsafe_allow_html=True)


@st.fragment(run_every=1.0)
def organ_message_panel():
    """Clicked-organ message; re-run every second so it disappears after its timeout"""
    text = st.session_state.viewer_state.organ_message.text
    if text:
        st.markdown(f'<div class="organ-message">{html.escape(text)}</div>', unsafe_allow_html=True)


try:
    glb_b64, recolored_meshes = render_model(
        default_config.viewer.model_path, organ_highlights, default_config.viewer.emissive_intensity
    )
except ModelLoadError as e:
    logger.error(f"3D model unavailable: {e}")
    st.error(
        f"**Error Loading 3D Model**\n\n{str(e)}\n\n"
        f"Please ensure the body model is available at `{default_config.viewer.model_path}` "
        f"(set `CASEVIS_MODEL_PATH` to use another file). Also check that the organ names in the "
        f"term mapping table match mesh names within your 3D model."
    )
else:
    message_slot = st.container()
    mesh_event = model_viewer(
        glb_b64,
        height=default_config.viewer.height,
        camera_position=default_config.viewer.camera_position,
        camera_fov=default_config.viewer.camera_fov,
        background=default_config.viewer.background,
        key="model_viewer"
    )
    clicked_mesh = viewer_state.accept_mesh_click(mesh_event)
    if clicked_mesh:
        click = SceneHighlighter.identify(clicked_mesh, organ_highlights)
        viewer_state.organ_message.show(click.message)

    with message_slot:
        organ_message_panel()

    with st.expander("🔎 Highlighted meshes", expanded=False):
        missing = len(organ_highlights) - len(recolored_meshes)
        st.write(", ".join(recolored_meshes) or "None")
        if missing:
            st.caption(f"{missing} highlight(s) had no matching mesh in the model")
