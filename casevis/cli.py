#!/usr/bin/env python3
"""
CaseVis CLI Interface
Inspect what a clinical note, a discharge summary and a body model produce, or launch the UI
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.markup import escape

from casevis.core.config import default_config
from casevis.core.mapping import OrganHighlight, load_mappings
from casevis.core.case_data import MedicalCase, load_case
from casevis.core.extraction import extract_organ_highlights
from casevis.core.phrases import derive_clickable_phrases
from casevis.core.annotate import annotate_text, render_summary_html, split_on_phrase
from casevis.core.scene import ModelLoadError, SceneHighlighter

console = Console()


class CaseVisCLI:
    """Command-line interface for the case visualizer"""

    def __init__(self, mappings_file: Optional[str] = None):
        self.mappings = load_mappings(mappings_file)
        self.case: Optional[MedicalCase] = None
        self.highlights: List[OrganHighlight] = []
        self.phrases: List[str] = []

    def analyze(self, case: MedicalCase):
        """Derive highlights and clickable phrases for a case and print them"""
        self.case = case
        self.highlights = extract_organ_highlights(case.notes, self.mappings)
        self.phrases = derive_clickable_phrases(case.summary_points, self.mappings)

        table = Table(title="🫀 Organ Highlights", show_lines=False)
        table.add_column("Organ", style="cyan")
        table.add_column("Color")
        table.add_column("Description")
        for highlight in self.highlights:
            table.add_row(
                highlight.organ_name,
                Text(highlight.color, style=f"bold {highlight.color}"),
                highlight.description or ""
            )
        if self.highlights:
            console.print(table)
        else:
            console.print("No mapped clinical terms found in the notes.", style="yellow")

        console.print(Panel(self._summary_text(), title="📋 Discharge Summary", border_style="blue"))

    def _summary_text(self) -> Text:
        text = Text()
        for point in self.case.summary_points:
            text.append("• ")
            for segment in annotate_text(point, self.phrases):
                text.append(segment.text, style="bold underline blue" if segment.clickable else None)
            text.append("\n")
        text.rstrip()
        return text

    def find(self, phrase: str, context: int = 80) -> bool:
        """Show the first occurrence of phrase in the notes"""
        parts = split_on_phrase(self.case.notes, phrase)
        if parts is None:
            console.print(f"'{escape(phrase)}' not found in the notes", style="yellow")
            return False

        before, matched, after = parts
        excerpt = Text(("…" if len(before) > context else "") + before[-context:])
        excerpt.append(matched, style="bold black on yellow")
        excerpt.append(after[:context] + ("…" if len(after) > context else ""))
        console.print(Panel(excerpt, title=f"🔍 {escape(phrase)}", border_style="yellow"))
        return True

    def inspect_model(self, model_path: str, list_meshes: bool = False) -> bool:
        """Apply the current highlights to a model and report what matched"""
        try:
            highlighter = SceneHighlighter.load_model(
                model_path, emissive_intensity=default_config.viewer.emissive_intensity
            )
        except ModelLoadError as e:
            console.print(f"❌ {escape(str(e))}", style="red")
            return False

        if list_meshes:
            table = Table(title=f"Meshes in {Path(model_path).name}")
            table.add_column("#", justify="right")
            table.add_column("Mesh name", style="cyan")
            for i, name in enumerate(highlighter.mesh_names()):
                table.add_row(str(i), name)
            console.print(table)

        highlighter.apply(self.highlights)
        matched = {h.organ_name for h, _ in highlighter.applied}
        for highlight in self.highlights:
            if highlight.organ_name in matched:
                console.print(f"✅ {highlight.organ_name} ({highlight.color})")
            else:
                console.print(f"⚠️  {highlight.organ_name}: no matching mesh", style="yellow")
        return True

    def export(self, output_path: str):
        """Export highlights and phrases (.json) or the annotated summary (.html)"""
        if output_path.endswith('.html'):
            content = render_summary_html(self.case.summary_points, self.phrases, self.case.summary_intro)
        else:
            content = json.dumps({
                'highlights': [
                    {'organ_name': h.organ_name, 'color': h.color, 'description': h.description}
                    for h in self.highlights
                ],
                'clickable_phrases': self.phrases,
            }, indent=2)

        Path(output_path).write_text(content, encoding='utf-8')
        console.print(f"💾 Exported to {escape(output_path)}", style="green")


def read_case(args) -> MedicalCase:
    """Build the case from --case, or --notes/--summary, falling back to the embedded demo case"""
    case = load_case(args.case or default_config.case_file)

    if args.notes:
        case.notes = Path(args.notes).read_text(encoding='utf-8')
    if args.summary:
        lines = Path(args.summary).read_text(encoding='utf-8').splitlines()
        case.summary_points = [line.strip() for line in lines if line.strip()]
        case.summary_intro = ""

    return case


def launch_ui():
    """Start the Streamlit app"""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(Path(__file__).parent / "main.py")] + sys.argv[1:]
    sys.exit(stcli.main())


def main():
    parser = argparse.ArgumentParser(
        description="CaseVis - Medical Case Visualizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze the embedded demo case
  casevis

  # Analyze your own note and summary (one point per line)
  casevis --notes note.txt --summary summary.txt

  # Locate a phrase in the notes
  casevis --find "cecal volvulus"

  # Check which highlights find a mesh in the body model
  casevis --model assets/body_model.glb --list-meshes

  # Export the annotated summary
  casevis --export summary.html
        """
    )

    parser.add_argument("--case", "-c", help="YAML case file (notes, summary_points, summary_intro)")
    parser.add_argument("--notes", "-n", help="Plain-text clinical note")
    parser.add_argument("--summary", "-s", help="Plain-text discharge summary, one point per line")
    parser.add_argument("--mappings", "-m", help="YAML term mapping table")
    parser.add_argument("--find", "-f", help="Phrase to locate in the notes")
    parser.add_argument("--model", help="Body model (.glb/.gltf) to check highlights against")
    parser.add_argument("--list-meshes", action="store_true", help="List mesh names of --model")
    parser.add_argument("--export", "-e", help="Export results to file (.json or .html)")
    parser.add_argument("--selftest", action="store_true", help="Run self-test with the demo case")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    level = "DEBUG" if args.debug else default_config.log_level
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING))

    try:
        cli = CaseVisCLI(args.mappings or default_config.mappings_file)
        case = read_case(args)
    except (ValueError, OSError) as e:
        console.print(f"❌ {escape(str(e))}", style="red")
        return 1

    if args.selftest:
        console.print(Panel("🧪 Running Self-Test", style="bold magenta"))
        cli.analyze(load_case())
        checks = [
            ("necrotic gut highlights", any(h.color == "#8B0000" for h in cli.highlights)),
            ("clickable 'cecal volvulus'", "cecal volvulus" in cli.phrases),
            ("phrase located in notes", cli.find("large bowel obstruction")),
        ]
        for name, ok in checks:
            console.print(f"{'✅' if ok else '❌'} {name}", style="green" if ok else "red")

        if all(ok for _, ok in checks):
            console.print("\n✅ Self-test completed successfully!", style="green")
            return 0
        console.print("\n❌ Self-test failed", style="red")
        return 1

    cli.analyze(case)

    status = 0
    if args.find and not cli.find(args.find):
        status = 1

    model = args.model or (default_config.viewer.model_path if args.list_meshes else None)
    if model and not cli.inspect_model(model, list_meshes=args.list_meshes):
        status = 1

    if args.export:
        cli.export(args.export)

    return status


if __name__ == "__main__":
    sys.exit(main())
