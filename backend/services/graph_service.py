import asyncio
import logging
import re
from collections.abc import Sequence
from datetime import date

import httpx

from backend.api.schemas.contributions import YearBlock
from backend.github_api import DataUnavailableError
from backend.github_api import fetch_year_contributions
from backend.github_api import verify_user_authorization
from backend.services.merge_service import merge_calendars
from backend.services.svg_service import compose_svg
from backend.services.themes import DEFAULT_THEME
from backend.services.themes import VALID_THEMES
from backend.settings import Settings


logger = logging.getLogger(__name__)

# GitHub was founded in 2008, there are no contributions before it.
FIRST_YEAR = 2008

# GitHub logins: alphanumerics and single hyphens, at most 39 characters.
GITHUB_LOGIN_PATTERN = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})")


class ConfigurationError(Exception):
    """Raised when a required setting is missing."""


class InvalidParameterError(Exception):
    """Raised when a request parameter has an unusable value."""


class NoAuthorizedUsersError(Exception):
    """Raised when no account is left to render after authorization."""


def require_configuration(settings: Settings) -> tuple[str, str]:
    """Return the GitHub token and the primary user from settings."""

    token = (settings.github_token or "").strip()
    if not token:
        raise ConfigurationError("Error: GITHUB_TOKEN not configured.")

    primary_user = (settings.primary_user or "").strip()
    if not primary_user:
        raise ConfigurationError("Error: PRIMARY_USER not configured.")

    return token, primary_user


def parse_theme(raw_theme: str | None) -> str:
    theme = raw_theme or DEFAULT_THEME
    if theme not in VALID_THEMES:
        options = "\n- ".join(VALID_THEMES)
        raise InvalidParameterError(
            f"Error: Invalid theme parameter. Valid options: \n- {options}"
        )
    return theme


def parse_year_count(raw_years: str | None) -> int:
    """Parse the `years` parameter, defaulting to the current year only."""

    if raw_years is None or not raw_years.strip():
        return 1

    try:
        year_count = int(raw_years.strip())
    except ValueError:
        year_count = 0

    if year_count < 1:
        raise InvalidParameterError(
            "Error: Invalid years parameter. "
            "Use ?years=N where N is a positive number"
        )
    return year_count


def years_back(year_count: int, current_year: int) -> list[int]:
    """Count back from the current year, never going below `FIRST_YEAR`."""

    first = max(FIRST_YEAR, current_year - year_count + 1)
    return list(range(current_year, first - 1, -1))


def parse_merge_users(raw_merge: str | None, primary_user: str) -> list[str]:
    """Split the `merge` parameter into distinct non-primary usernames.

    Names that are not valid GitHub logins are logged and excluded.
    """

    if not raw_merge:
        return []

    users: list[str] = []
    for item in raw_merge.split(","):
        username = item.strip()
        if not username or username == primary_user or username in users:
            continue
        if not GITHUB_LOGIN_PATTERN.fullmatch(username):
            logger.warning("Skipping invalid username: %r", username)
            continue
        users.append(username)
    return users


def require_users(usernames: Sequence[str]) -> None:
    if len(usernames) == 0:
        raise NoAuthorizedUsersError("Error: No authorized users to display")


async def authorize_users(
    client: httpx.AsyncClient,
    primary_user: str,
    additional_users: Sequence[str],
    token: str,
    api_base_url: str,
) -> list[str]:
    """Return the primary user followed by every authorized additional user."""

    results = await asyncio.gather(
        *(
            verify_user_authorization(
                client,
                additional_user=username,
                primary_user=primary_user,
                token=token,
                api_base_url=api_base_url,
            )
            for username in additional_users
        )
    )

    authorized = [primary_user]
    for username, is_authorized in zip(additional_users, results):
        if is_authorized:
            authorized.append(username)
        else:
            logger.warning("Skipping unauthorized user: %s", username)
    return authorized


async def fetch_year_block(
    client: httpx.AsyncClient,
    year: int,
    usernames: Sequence[str],
    token: str,
    graphql_url: str,
) -> YearBlock:
    """Fetch every user's calendar for a year and merge them."""

    try:
        calendars = await asyncio.gather(
            *(
                fetch_year_contributions(
                    client,
                    username=username,
                    year=year,
                    token=token,
                    graphql_url=graphql_url,
                )
                for username in usernames
            )
        )
    except DataUnavailableError as exc:
        logger.warning(
            "Contributions unavailable for %s in %s: %s",
            exc.username,
            exc.year,
            exc.reason,
        )
        raise

    return YearBlock(year=year, calendar=merge_calendars(calendars, usernames))


async def build_contribution_graph(
    client: httpx.AsyncClient,
    settings: Settings,
    merge: str | None = None,
    years: str | None = None,
    theme: str | None = None,
    today: date | None = None,
) -> str:
    """Render the merged contribution graph SVG for a request.

    Settings and parameters are validated before any GitHub call is made.
    """

    token, primary_user = require_configuration(settings)
    theme_name = parse_theme(theme)
    year_count = parse_year_count(years)
    current_year = (today or date.today()).year
    requested_years = years_back(year_count, current_year)

    usernames = await authorize_users(
        client,
        primary_user=primary_user,
        additional_users=parse_merge_users(merge, primary_user),
        token=token,
        api_base_url=settings.github_api_base_url,
    )
    require_users(usernames)

    year_blocks = await asyncio.gather(
        *(
            fetch_year_block(
                client,
                year=year,
                usernames=usernames,
                token=token,
                graphql_url=settings.github_graphql_url,
            )
            for year in requested_years
        )
    )

    return compose_svg(year_blocks, usernames, theme_name)
