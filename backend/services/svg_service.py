from collections.abc import Sequence

from backend.api.schemas.contributions import YearBlock
from backend.services.layout_service import CELL_STEP
from backend.services.layout_service import DAY_LABEL_WIDTH
from backend.services.layout_service import escape_xml
from backend.services.layout_service import render_year_graph
from backend.services.themes import Theme
from backend.services.themes import resolve_theme


PADDING = 10
HEADER_HEIGHT = 25
GRAPH_SPACING = 20
# Extra room under the last year so the bottom edge mirrors the header.
BOTTOM_SPACING = 15

FONT_FAMILY = (
    "-apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif"
)


def build_styles(theme: Theme) -> str:
    """Return the embedded stylesheet for a theme."""

    return f"""
    .header-label {{
      font-family: {FONT_FAMILY};
      font-size: 12px;
      font-weight: 600;
      fill: {theme.year_label};
    }}
    .year-label {{
      font-family: {FONT_FAMILY};
      font-size: 14px;
      font-weight: 600;
      fill: {theme.year_label};
    }}
    .month-label {{
      font-family: {FONT_FAMILY};
      font-size: 10px;
      fill: {theme.month_label};
    }}
    .day-label {{
      font-family: {FONT_FAMILY};
      font-size: 9px;
      fill: {theme.day_label};
    }}
    .contribution-square {{
      shape-rendering: geometricPrecision;
      outline: 1px solid rgba(27, 31, 35, 0.06);
      outline-offset: -1px;
    }}"""


def compose_svg(
    year_blocks: Sequence[YearBlock],
    usernames: Sequence[str],
    theme_name: str | None = None,
) -> str:
    """Stack year graphs top to bottom under a header listing the accounts.

    The document is as wide as the year with the most weeks.
    """

    if not year_blocks:
        raise ValueError("at least one year is required to compose a graph")

    theme = resolve_theme(theme_name)
    max_weeks = max(len(block.calendar.weeks) for block in year_blocks)
    width = PADDING + DAY_LABEL_WIDTH + max_weeks * CELL_STEP + PADDING

    current_y = PADDING + HEADER_HEIGHT
    graphs: list[str] = []
    for index, block in enumerate(year_blocks):
        graph = render_year_graph(
            block.calendar,
            block.year,
            usernames,
            x_offset=0,
            y_offset=current_y,
            theme=theme,
            padding=PADDING,
        )
        graphs.append(graph.svg)
        current_y += graph.height
        if index < len(year_blocks) - 1:
            current_y += GRAPH_SPACING

    height = current_y + PADDING + BOTTOM_SPACING
    header = escape_xml(f"Users - {', '.join(usernames)}")
    body = "\n".join(graphs)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
  <style>{build_styles(theme)}</style>
  <rect width="100%" height="100%" fill="{theme.background}"/>
  <text x="{PADDING}" y="{PADDING + 16}" class="header-label">{header}</text>
  {body}
</svg>"""
