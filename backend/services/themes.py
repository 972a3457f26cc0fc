from types import MappingProxyType

from pydantic import BaseModel
from pydantic import ConfigDict

from backend.api.schemas.contributions import ContributionLevel


DEFAULT_THEME = "dark"


class Theme(BaseModel):
    """Fixed palette used to render a contribution graph."""

    model_config = ConfigDict(frozen=True)

    background: str
    year_label: str
    month_label: str
    day_label: str
    levels: dict[ContributionLevel, str]


def _levels(
    none: str, first: str, second: str, third: str, fourth: str
) -> dict[ContributionLevel, str]:
    return {
        ContributionLevel.NONE: none,
        ContributionLevel.FIRST_QUARTILE: first,
        ContributionLevel.SECOND_QUARTILE: second,
        ContributionLevel.THIRD_QUARTILE: third,
        ContributionLevel.FOURTH_QUARTILE: fourth,
    }


THEMES = MappingProxyType(
    {
        "dark": Theme(
            background="#0d1117",
            year_label="#f0f6fc",
            month_label="#8b949e",
            day_label="#8b949e",
            levels=_levels("#161b22", "#0e4429", "#006d32", "#26a641", "#39d353"),
        ),
        "light": Theme(
            background="#ffffff",
            year_label="#24292f",
            month_label="#57606a",
            day_label="#57606a",
            levels=_levels("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"),
        ),
        "solarized-dark": Theme(
            background="#002b36",
            year_label="#839496",
            month_label="#839496",
            day_label="#839496",
            levels=_levels("#073642", "#268bd2", "#2aa198", "#859900", "#b58900"),
        ),
        "solarized-light": Theme(
            background="#fdf6e3",
            year_label="#657b83",
            month_label="#657b83",
            day_label="#657b83",
            levels=_levels("#eee8d5", "#268bd2", "#2aa198", "#859900", "#b58900"),
        ),
        "nord-polar-night": Theme(
            background="#2e3440",
            year_label="#d8dee9",
            month_label="#d8dee9",
            day_label="#d8dee9",
            levels=_levels("#3b4252", "#434c5e", "#4c566a", "#5e81ac", "#88c0d0"),
        ),
        "nord-frost": Theme(
            background="#2e3440",
            year_label="#d8dee9",
            month_label="#d8dee9",
            day_label="#d8dee9",
            levels=_levels("#3b4252", "#8fbcbb", "#88c0d0", "#81a1c1", "#5e81ac"),
        ),
        "nord-aurora": Theme(
            background="#2e3440",
            year_label="#d8dee9",
            month_label="#d8dee9",
            day_label="#d8dee9",
            levels=_levels("#3b4252", "#a3be8c", "#ebcb8b", "#d08770", "#bf616a"),
        ),
    }
)

VALID_THEMES: tuple[str, ...] = tuple(THEMES)


def resolve_theme(name: str | None) -> Theme:
    """Return the named theme, or the whole `dark` theme for unknown names."""

    if name is None:
        return THEMES[DEFAULT_THEME]
    return THEMES.get(name, THEMES[DEFAULT_THEME])


def level_color(theme: Theme, level: ContributionLevel) -> str:
    return theme.levels.get(level, theme.levels[ContributionLevel.NONE])
