"""HTML export functionality for ER diagrams."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from diagram.schema_types import DiagramSchema

TEMPLATE_DIR = Path(__file__).parent / "templates"

_JINJA_ENV = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
)


def diagram_to_html(diagram: DiagramSchema, title: str | None = None) -> str:
    """Create a standalone HTML page from diagram data."""
    template = _JINJA_ENV.get_template("diagram.html")
    return template.render(
        title=title or f"ER Diagram - {diagram['name']}",
        diagram=diagram,
    )
