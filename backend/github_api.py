import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from backend.api.schemas.contributions import ContributionCalendar


logger = logging.getLogger(__name__)

USER_AGENT = "github-contribution-merger"

CONTRIBUTIONS_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


class DataUnavailableError(Exception):
    """Raised when a user's calendar for a year cannot be fetched."""

    def __init__(self, username: str, year: int, reason: str) -> None:
        super().__init__(f"contributions of {username} for {year}: {reason}")
        self.username = username
        self.year = year
        self.reason = reason


def authorization_filename(primary_user: str) -> str:
    return f"github-contribution-merge-allow-{primary_user}.md"


async def fetch_year_contributions(
    client: httpx.AsyncClient,
    username: str,
    year: int,
    token: str,
    graphql_url: str,
) -> ContributionCalendar:
    """Fetch one calendar year of contribution days for a user from GraphQL.

    Raises:
        DataUnavailableError: On transport failures, GraphQL errors, unknown
            users, and payloads that do not match the calendar shape.
    """

    variables = {
        "login": username,
        "from": f"{year}-01-01T00:00:00Z",
        "to": f"{year}-12-31T23:59:59Z",
    }
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }

    try:
        response = await client.post(
            graphql_url,
            json={"query": CONTRIBUTIONS_QUERY, "variables": variables},
            headers=headers,
        )
        response.raise_for_status()
        payload: Any = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise DataUnavailableError(username, year, "GitHub request failed") from exc

    if not isinstance(payload, Mapping):
        raise DataUnavailableError(username, year, "GraphQL response is invalid")

    errors = payload.get("errors")
    if errors:
        logger.error("GraphQL errors for %s in %s: %s", username, year, errors)
        raise DataUnavailableError(username, year, "GraphQL returned errors")

    data = payload.get("data")
    user = data.get("user") if isinstance(data, Mapping) else None
    if not isinstance(user, Mapping):
        raise DataUnavailableError(username, year, "user not found")

    collection = user.get("contributionsCollection")
    calendar = (
        collection.get("contributionCalendar")
        if isinstance(collection, Mapping)
        else None
    )
    if not isinstance(calendar, Mapping):
        raise DataUnavailableError(username, year, "contribution calendar is missing")

    try:
        return ContributionCalendar.model_validate(calendar)
    except ValueError as exc:
        raise DataUnavailableError(
            username, year, "contribution calendar is malformed"
        ) from exc


async def verify_user_authorization(
    client: httpx.AsyncClient,
    additional_user: str,
    primary_user: str,
    token: str,
    api_base_url: str,
) -> bool:
    """Check that `additional_user` published a gist allowing `primary_user`.

    Any failure is reported as not authorized.
    """

    expected_filename = authorization_filename(primary_user)
    try:
        response = await client.get(
            f"{api_base_url}/users/{quote(additional_user, safe='')}/gists",
            params={"per_page": 100},
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            },
        )
        if response.is_error:
            logger.warning(
                "Failed to fetch gists for %s: %s",
                additional_user,
                response.status_code,
            )
            return False
        gists: Any = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning(
            "Error verifying authorization for %s: %s", additional_user, exc
        )
        return False

    if not isinstance(gists, list):
        logger.warning("Gist listing for %s is invalid", additional_user)
        return False

    for gist in gists:
        files = gist.get("files") if isinstance(gist, Mapping) else None
        if isinstance(files, Mapping) and expected_filename in files:
            return True

    logger.warning(
        "No auth gist found for %s (expected filename: %s)",
        additional_user,
        expected_filename,
    )
    return False
