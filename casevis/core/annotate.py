"""
CaseVis Text Annotation
Splits text into plain and clickable runs and renders both text views as HTML
"""

import re
import html
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass, asdict
import logging

logger = logging.getLogger(__name__)

CLICKABLE_STYLE = (
    "color: #007bff; cursor: pointer; font-weight: bold; background-color: #fff3cd; "
    "text-decoration: underline; padding: 0.5px 2px; border-radius: 3px; border: 1px solid #ffeeba;"
)

NOTES_STYLE = (
    "white-space: pre-wrap; font-family: monospace; padding: 10px; border: 1px solid #ccc; "
    "height: {height}px; overflow-y: auto; box-sizing: border-box; margin: 0;"
)

MARK_STYLE = "background-color: {color}; font-weight: bold;"


@dataclass(frozen=True)
class Segment:
    """A run of text, either plain or clickable"""
    text: str
    clickable: bool = False

    def to_dict(self):
        return asdict(self)


def build_phrase_pattern(phrases: Sequence[str]) -> Optional["re.Pattern"]:
    """
    Combine candidate phrases into one case-insensitive alternation

    Longer phrases come first so "bowel obstruction" wins over "bowel" at the same position.
    """
    candidates = sorted((p for p in phrases if p), key=len, reverse=True)
    if not candidates:
        return None
    return re.compile('|'.join(re.escape(p) for p in candidates), re.IGNORECASE)


def annotate_text(text: str, phrases: Sequence[str]) -> List[Segment]:
    """
    Break text into plain and clickable segments

    Args:
        text: Text to annotate
        phrases: Candidate phrases (matched case-insensitively)

    Returns:
        Segments whose texts concatenate back to the input exactly
    """
    if not text:
        return []

    pattern = build_phrase_pattern(phrases)
    if pattern is None:
        return [Segment(text)]

    segments = []
    last_index = 0
    for match in pattern.finditer(text):
        if match.start() > last_index:
            segments.append(Segment(text[last_index:match.start()]))
        segments.append(Segment(match.group(0), clickable=True))
        last_index = match.end()

    if last_index < len(text):
        segments.append(Segment(text[last_index:]))

    return segments


def split_on_phrase(text: str, phrase: Optional[str]) -> Optional[Tuple[str, str, str]]:
    """
    Split text around the first case-insensitive occurrence of phrase

    Returns:
        (before, match, after) with the text's own casing, or None when the phrase is empty or absent
    """
    if not phrase or not text:
        return None

    match = re.search(re.escape(phrase), text, re.IGNORECASE)
    if match is None:
        logger.debug(f"Phrase '{phrase}' not found in notes")
        return None

    return text[:match.start()], match.group(0), text[match.end():]


def render_notes_html(text: str, phrase: Optional[str] = None, version: int = 0,
                      height: int = 400, mark_color: str = "yellow") -> str:
    """
    Render the notes view, emphasizing and revealing the first occurrence of phrase

    The request version is written into the document so that asking for the same
    phrase again yields a new document and the reveal script runs again.
    """
    parts = split_on_phrase(text, phrase)

    if parts is None:
        body = html.escape(text)
        script = ""
    else:
        before, matched, after = parts
        body = (
            f'{html.escape(before)}'
            f'<mark id="phrase-target" style="{MARK_STYLE.format(color=html.escape(mark_color))}">'
            f'{html.escape(matched)}</mark>'
            f'{html.escape(after)}'
        )
        script = (
            "<script>\n"
            "const target = document.getElementById('phrase-target');\n"
            "if (target) { target.scrollIntoView({behavior: 'smooth', block: 'center'}); }\n"
            "</script>"
        )

    return (
        f'<!-- phrase request {version} -->\n'
        f'<div id="notes" style="{NOTES_STYLE.format(height=height)}">{body}</div>\n'
        f'{script}'
    )


def render_summary_html(points: Sequence[str], phrases: Sequence[str], intro: str = "") -> str:
    """Static HTML for the discharge summary with clickable phrases styled inline"""
    items = []
    for point in points:
        runs = []
        for segment in annotate_text(point, phrases):
            escaped = html.escape(segment.text)
            if segment.clickable:
                runs.append(
                    f'<span class="clickable-phrase" style="{CLICKABLE_STYLE}" '
                    f'title="Click to find: &quot;{escaped}&quot;">{escaped}</span>'
                )
            else:
                runs.append(escaped)
        items.append(f"  <li>{''.join(runs)}</li>")

    intro_html = f"<p>{html.escape(intro)}</p>\n" if intro else ""
    return (
        '<div style="padding: 10px; border: 1px solid #ccc;">\n'
        f'{intro_html}'
        '<ul style="list-style-type: disc; padding-left: 20px;">\n'
        + "\n".join(items) +
        "\n</ul>\n</div>"
    )
