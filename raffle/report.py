"""Winners report export.

HTML is rendered with Jinja2 from ``raffle/templates``; PDF output converts
that HTML with WeasyPrint, which is imported on demand because it needs
native libraries that a drawing station may not ship.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .ledger.winners import group_by_prize
from .models import Winner

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_TITLE = "Raffle Winners"
DEFAULT_PDF_NAME = "raffle_winners.pdf"


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )


def render_winners_html(winners: Iterable[Winner], *, title: str = DEFAULT_TITLE) -> str:
    """Render a self-contained HTML report of the winners.

    Prizes appear in the order they were first drawn and winners in
    confirmation order, numbered from 1 within each prize.
    """
    winners = list(winners)
    groups = group_by_prize(winners)
    template = _get_env().get_template("winners.html.j2")
    return template.render(
        title=title,
        groups=groups,
        total=len(winners),
        generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
    )


def export_winners_pdf(
    winners: Iterable[Winner],
    path: Union[str, Path] = DEFAULT_PDF_NAME,
    *,
    title: str = DEFAULT_TITLE,
) -> Path:
    """Write the winners report as a PDF and return its path.

    Raises
    ------
    ValueError
        If there are no winners to export.
    """
    winners = list(winners)
    if not winners:
        raise ValueError("There are no winners to export")

    from weasyprint import HTML

    target = Path(path)
    html = render_winners_html(winners, title=title)
    HTML(string=html).write_pdf(str(target))
    logger.info(f"Exported {len(winners)} winners to {target}")
    return target


__all__ = ["export_winners_pdf", "render_winners_html"]
