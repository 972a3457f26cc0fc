from datetime import date
from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ContributionLevel(str, Enum):
    """Activity bucket derived from a daily contribution count."""

    NONE = "NONE"
    FIRST_QUARTILE = "FIRST_QUARTILE"
    SECOND_QUARTILE = "SECOND_QUARTILE"
    THIRD_QUARTILE = "THIRD_QUARTILE"
    FOURTH_QUARTILE = "FOURTH_QUARTILE"


class ContributionDay(BaseModel):
    """Single day of one account's contribution calendar."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: date
    count: int = Field(alias="contributionCount", ge=0)


class ContributionWeek(BaseModel):
    """Sunday-start week bucket as returned by GitHub."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    days: list[ContributionDay] = Field(alias="contributionDays")


class ContributionCalendar(BaseModel):
    """One account's contribution calendar for a single calendar year."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    weeks: list[ContributionWeek]


class MergedDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    count: int
    level: ContributionLevel

    @property
    def weekday(self) -> int:
        """Weekday row with Sunday as 0 and Saturday as 6."""

        return (self.date.weekday() + 1) % 7


class MergedWeek(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: list[MergedDay]


class MergedCalendar(BaseModel):
    """Aggregate calendar of several accounts for one year.

    `breakdown` maps each date to the individual count of every account that
    reported it. Accounts missing from a date count as zero.
    """

    model_config = ConfigDict(frozen=True)

    total: int
    weeks: list[MergedWeek]
    breakdown: dict[date, dict[str, int]]

    def count_for(self, day: date, username: str) -> int:
        return self.breakdown.get(day, {}).get(username, 0)


class YearBlock(BaseModel):
    """Merged calendar of a single year, ready to be rendered."""

    model_config = ConfigDict(frozen=True)

    year: int
    calendar: MergedCalendar
