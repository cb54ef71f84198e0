from __future__ import annotations
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .client import display_for

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


@dataclass
class Reporter:
    templates_dir: Path = field(default=TEMPLATES_DIR)

    def __post_init__(self):
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=select_autoescape(['html', 'xml', 'j2']),
        )

    def render_dashboard(self, provider_names: Sequence[str]) -> str:
        tpl = self.env.get_template('dashboard.html.j2')
        providers = [display_for(n) for n in provider_names]
        return tpl.render(providers=[{"name": p.name, "color": p.color} for p in providers])

    def render_cards_html(self, prompt: str, cards: Sequence, transport_error: bool = False) -> str:
        tpl = self.env.get_template('cards.html.j2')
        return tpl.render(prompt=prompt, cards=cards, transport_error=transport_error)

    def write_html(self, prompt: str, cards: Sequence, out_path: Path, transport_error: bool = False) -> Path:
        html = self.render_cards_html(prompt, cards, transport_error=transport_error)
        out_path = Path(out_path)
        out_path.write_text(html, encoding='utf-8')
        return out_path


def render_cards_text(cards: Iterable, width: int = 78) -> str:
    """Plain-text rendering of result cards for terminals."""
    blocks: List[str] = []
    for c in cards:
        header = f"== {c.provider} "
        badge = f" {c.response_time}ms =="
        blocks.append(header + "=" * max(0, width - len(header) - len(badge)) + badge)
        if c.error:
            blocks.append(f"  ! {c.error}")
        else:
            for para in c.response.splitlines() or [""]:
                wrapped = textwrap.wrap(para, width=width - 2) or [""]
                blocks.extend("  " + line for line in wrapped)
        blocks.append("")
    return "\n".join(blocks)
