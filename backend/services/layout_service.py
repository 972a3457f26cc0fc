from collections.abc import Sequence
from datetime import date
from xml.sax.saxutils import escape

from pydantic import BaseModel
from pydantic import ConfigDict

from backend.api.schemas.contributions import MergedCalendar
from backend.services.themes import Theme
from backend.services.themes import level_color


CELL_SIZE = 10
CELL_GAP = 3
CELL_STEP = CELL_SIZE + CELL_GAP
YEAR_LABEL_HEIGHT = 20
MONTH_LABEL_HEIGHT = 15
DAY_LABEL_WIDTH = 30
DAYS_PER_WEEK = 7

MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
# Sunday first, matching GitHub's week buckets.
DAY_LABELS = ("", "Mon", "", "Wed", "", "Fri", "")

_XML_QUOTES = {"'": "&apos;", '"': "&quot;"}


class YearGraph(BaseModel):
    """SVG fragment of one year's grid and the space it occupies."""

    model_config = ConfigDict(frozen=True)

    svg: str
    width: int
    height: int


def escape_xml(value: str) -> str:
    """Escape `< > & ' "` so text can be embedded in SVG markup."""

    return escape(value, _XML_QUOTES)


def format_tooltip_date(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1]} {day.day}"


def build_tooltip(
    day: date, calendar: MergedCalendar, usernames: Sequence[str]
) -> str:
    """Describe one day's contributions per account, one line each."""

    lines = [f"{format_tooltip_date(day)}:"]
    for username in usernames:
        count = calendar.count_for(day, username)
        if count == 0:
            lines.append(f"{username} no contributions")
        else:
            suffix = "" if count == 1 else "s"
            lines.append(f"{username} {count} contribution{suffix}")
    return "\n".join(lines).strip()


def graph_width(week_count: int) -> int:
    return DAY_LABEL_WIDTH + week_count * CELL_STEP


def graph_height() -> int:
    return YEAR_LABEL_HEIGHT + MONTH_LABEL_HEIGHT + DAYS_PER_WEEK * CELL_STEP


def render_year_graph(
    calendar: MergedCalendar,
    year: int,
    usernames: Sequence[str],
    x_offset: int,
    y_offset: int,
    theme: Theme,
    padding: int = 10,
) -> YearGraph:
    """Lay out a merged year as labelled week columns of day cells.

    Columns follow the calendar's week buckets and rows follow each date's
    weekday, Sunday on top.
    """

    left = x_offset + padding
    top = y_offset + padding
    grid_left = left + DAY_LABEL_WIDTH
    grid_top = top + YEAR_LABEL_HEIGHT + MONTH_LABEL_HEIGHT

    parts: list[str] = [
        f'<text x="{left}" y="{top + 14}" class="year-label">{year}</text>\n'
    ]

    current_month: int | None = None
    for week_index, week in enumerate(calendar.weeks):
        if not week.days:
            continue
        first_day = week.days[0].date
        if first_day.month != current_month and first_day.day <= 7:
            month_x = grid_left + week_index * CELL_STEP
            month_y = top + YEAR_LABEL_HEIGHT + 10
            parts.append(
                f'<text x="{month_x}" y="{month_y}" class="month-label">'
                f"{MONTH_NAMES[first_day.month - 1]}</text>\n"
            )
            current_month = first_day.month

    for row, label in enumerate(DAY_LABELS):
        if not label:
            continue
        label_y = grid_top + row * CELL_STEP + CELL_SIZE - 2
        parts.append(
            f'<text x="{left}" y="{label_y}" class="day-label">{label}</text>\n'
        )

    for week_index, week in enumerate(calendar.weeks):
        x = grid_left + week_index * CELL_STEP
        for day in week.days:
            y = grid_top + day.weekday * CELL_STEP
            tooltip = build_tooltip(day.date, calendar, usernames)
            parts.append(
                f'<rect class="contribution-square" x="{x}" y="{y}" '
                f'width="{CELL_SIZE}" height="{CELL_SIZE}" '
                f'fill="{level_color(theme, day.level)}" '
                f'data-date="{escape_xml(day.date.isoformat())}" '
                f'data-count="{day.count}">\n'
                f"  <title>{escape_xml(tooltip)}</title>\n"
                "</rect>\n"
            )

    return YearGraph(
        svg="".join(parts),
        width=graph_width(len(calendar.weeks)),
        height=graph_height(),
    )
