from collections.abc import Sequence
from datetime import date

from backend.api.schemas.contributions import ContributionCalendar
from backend.api.schemas.contributions import ContributionLevel
from backend.api.schemas.contributions import MergedCalendar
from backend.api.schemas.contributions import MergedDay
from backend.api.schemas.contributions import MergedWeek


def contribution_level(count: int) -> ContributionLevel:
    """Map a daily contribution count to its activity level."""

    if count <= 0:
        return ContributionLevel.NONE
    if count < 5:
        return ContributionLevel.FIRST_QUARTILE
    if count < 10:
        return ContributionLevel.SECOND_QUARTILE
    if count < 20:
        return ContributionLevel.THIRD_QUARTILE
    return ContributionLevel.FOURTH_QUARTILE


def merge_calendars(
    calendars: Sequence[ContributionCalendar],
    usernames: Sequence[str],
) -> MergedCalendar:
    """Sum several accounts' calendars of the same year into one.

    The first calendar's week partition is used as the layout template; the
    other calendars are matched by date, so their week boundaries may differ.
    A templated date missing from the accumulated counts is merged as zero.
    """

    if not calendars:
        raise ValueError("at least one calendar is required to merge")
    if len(calendars) != len(usernames):
        raise ValueError("every calendar needs exactly one username")

    summed_counts: dict[date, int] = {}
    breakdown: dict[date, dict[str, int]] = {}

    for calendar, username in zip(calendars, usernames):
        for week in calendar.weeks:
            for day in week.days:
                breakdown.setdefault(day.date, {})[username] = day.count
                summed_counts[day.date] = summed_counts.get(day.date, 0) + day.count

    total = 0
    weeks: list[MergedWeek] = []
    for week in calendars[0].weeks:
        days: list[MergedDay] = []
        for day in week.days:
            count = summed_counts.get(day.date, 0)
            total += count
            days.append(
                MergedDay(date=day.date, count=count, level=contribution_level(count))
            )
        weeks.append(MergedWeek(days=days))

    return MergedCalendar(total=total, weeks=weeks, breakdown=breakdown)
