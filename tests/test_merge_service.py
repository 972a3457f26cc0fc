from datetime import date

import pytest

from backend.api.schemas.contributions import ContributionLevel
from backend.services.merge_service import contribution_level
from backend.services.merge_service import merge_calendars
from github_fakes import MONDAY
from github_fakes import build_calendar


@pytest.mark.parametrize(
    ("count", "level"),
    [
        (0, ContributionLevel.NONE),
        (1, ContributionLevel.FIRST_QUARTILE),
        (4, ContributionLevel.FIRST_QUARTILE),
        (5, ContributionLevel.SECOND_QUARTILE),
        (9, ContributionLevel.SECOND_QUARTILE),
        (10, ContributionLevel.THIRD_QUARTILE),
        (19, ContributionLevel.THIRD_QUARTILE),
        (20, ContributionLevel.FOURTH_QUARTILE),
        (250, ContributionLevel.FOURTH_QUARTILE),
    ],
)
def test_contribution_level_thresholds(count: int, level: ContributionLevel) -> None:
    assert contribution_level(count) is level


def test_merge_sums_counts_of_the_same_day() -> None:
    first = build_calendar(2024, {"2024-06-01": 3})
    second = build_calendar(2024, {"2024-06-01": 7})

    merged = merge_calendars([first, second], ["alice", "bob"])

    day = next(
        day
        for week in merged.weeks
        for day in week.days
        if day.date == date(2024, 6, 1)
    )
    assert day.count == 10
    assert day.level is ContributionLevel.THIRD_QUARTILE
    assert merged.total == 10
    assert merged.breakdown[date(2024, 6, 1)] == {"alice": 3, "bob": 7}
    assert merged.count_for(date(2024, 6, 1), "carol") == 0


def test_merge_keeps_totals_consistent_with_accounts() -> None:
    counts_a = {"2024-01-01": 2, "2024-03-15": 11, "2024-12-31": 1}
    counts_b = {"2024-03-15": 9, "2024-07-04": 25}
    merged = merge_calendars(
        [build_calendar(2024, counts_a), build_calendar(2024, counts_b)],
        ["alice", "bob"],
    )

    days = [day for week in merged.weeks for day in week.days]
    assert merged.total == sum(day.count for day in days) == 48
    for day in days:
        expected = counts_a.get(day.date.isoformat(), 0) + counts_b.get(
            day.date.isoformat(), 0
        )
        assert day.count == expected
        assert day.count == sum(
            merged.count_for(day.date, name) for name in ("alice", "bob")
        )


def test_merge_uses_first_calendar_as_template() -> None:
    sunday_weeks = build_calendar(2024, {"2024-02-29": 1})
    monday_weeks = build_calendar(2024, {"2024-02-29": 4}, week_starts_on=MONDAY)

    merged = merge_calendars([sunday_weeks, monday_weeks], ["alice", "bob"])

    assert [[day.date for day in week.days] for week in merged.weeks] == [
        [day.date for day in week.days] for week in sunday_weeks.weeks
    ]
    assert merged.total == 5

    reversed_merge = merge_calendars([monday_weeks, sunday_weeks], ["bob", "alice"])
    assert [len(week.days) for week in reversed_merge.weeks] == [
        len(week.days) for week in monday_weeks.weeks
    ]
    assert reversed_merge.total == 5


def test_merge_defaults_dates_missing_from_other_calendars() -> None:
    full_year = build_calendar(2024, {"2024-01-02": 2})
    other_year = build_calendar(2023, {"2023-05-05": 6})

    merged = merge_calendars([full_year, other_year], ["alice", "bob"])

    assert len(merged.weeks) == len(full_year.weeks)
    assert merged.total == 2
    assert merged.breakdown[date(2023, 5, 5)] == {"bob": 6}


def test_merge_single_calendar_reproduces_it() -> None:
    calendar = build_calendar(2023, {"2023-08-08": 20})

    merged = merge_calendars([calendar], ["alice"])

    assert merged.total == 20
    assert merged.weeks[0].days[0].date == date(2023, 1, 1)
    assert merged.weeks[0].days[0].level is ContributionLevel.NONE


def test_merge_requires_calendars() -> None:
    with pytest.raises(ValueError):
        merge_calendars([], [])


def test_merge_requires_one_username_per_calendar() -> None:
    with pytest.raises(ValueError):
        merge_calendars([build_calendar(2024)], ["alice", "bob"])


def test_merged_days_report_sunday_based_weekday() -> None:
    merged = merge_calendars([build_calendar(2024)], ["alice"])

    # Jan 1 2024 is a Monday, Jan 7 the first Sunday.
    assert merged.weeks[0].days[0].weekday == 1
    assert merged.weeks[1].days[0].weekday == 0
    assert merged.weeks[1].days[-1].weekday == 6
