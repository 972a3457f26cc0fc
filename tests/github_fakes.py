import json
from datetime import date
from datetime import timedelta

import httpx

from backend.api.schemas.contributions import ContributionCalendar
from backend.api.schemas.contributions import ContributionDay
from backend.api.schemas.contributions import ContributionWeek
from backend.github_api import authorization_filename


SUNDAY = 6
MONDAY = 0


def build_calendar(
    year: int,
    counts: dict[str, int] | None = None,
    week_starts_on: int = SUNDAY,
) -> ContributionCalendar:
    """Build a full-year calendar split into weeks starting on `week_starts_on`."""

    counts = counts or {}
    weeks: list[list[ContributionDay]] = []
    current: list[ContributionDay] = []
    day = date(year, 1, 1)
    while day.year == year:
        if day.weekday() == week_starts_on and current:
            weeks.append(current)
            current = []
        current.append(ContributionDay(date=day, count=counts.get(day.isoformat(), 0)))
        day += timedelta(days=1)
    weeks.append(current)
    return ContributionCalendar(weeks=[ContributionWeek(days=days) for days in weeks])


def calendar_payload(calendar: ContributionCalendar) -> dict[str, object]:
    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": calendar.model_dump(
                        mode="json", by_alias=True
                    )
                }
            }
        }
    }


def build_github_transport(
    counts_by_user: dict[str, dict[str, int]],
    authorized_users: set[str] | None = None,
    primary_user: str = "octocat",
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Fake GitHub serving GraphQL calendars and gist listings."""

    authorized_users = authorized_users or set()
    allowed_file = authorization_filename(primary_user)

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)

        if request.url.path == "/graphql":
            variables = json.loads(request.content)["variables"]
            login = variables["login"]
            year = int(variables["from"][:4])
            if login not in counts_by_user:
                return httpx.Response(
                    200,
                    json={
                        "data": {"user": None},
                        "errors": [{"message": f"Could not resolve user {login}"}],
                    },
                )
            calendar = build_calendar(year, counts_by_user[login])
            return httpx.Response(200, json=calendar_payload(calendar))

        if request.url.path.endswith("/gists"):
            username = request.url.path.split("/")[2]
            filename = allowed_file if username in authorized_users else "notes.md"
            return httpx.Response(
                200, json=[{"id": "1", "files": {filename: {"filename": filename}}}]
            )

        return httpx.Response(404, json={"message": "Not Found"})

    return httpx.MockTransport(handler)
