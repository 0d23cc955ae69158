from __future__ import annotations

import enum


class RecurrencePattern(str, enum.Enum):
    once = "once"
    daily = "daily"
    specific_days = "specific_days"
    weekly = "weekly"


class Weekday(str, enum.Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class BadgeTier(str, enum.Enum):
    gold = "gold"
    silver = "silver"
    bronze = "bronze"
    shameful = "shameful"


class MilestoneTier(str, enum.Enum):
    early = "early"
    intermediate = "intermediate"
    advanced = "advanced"
    legendary = "legendary"


class NotificationType(str, enum.Enum):
    milestone = "milestone"
