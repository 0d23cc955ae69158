from momentum.models.badge import Badge
from momentum.models.daily_summary import DailySummary
from momentum.models.milestone_achievement import MilestoneAchievement
from momentum.models.notification import Notification
from momentum.models.occurrence import Occurrence
from momentum.models.recurrence_rule import RecurrenceRule
from momentum.models.streak import Streak
from momentum.models.task import Task
from momentum.models.user import User

__all__ = [
    "Badge",
    "DailySummary",
    "MilestoneAchievement",
    "Notification",
    "Occurrence",
    "RecurrenceRule",
    "Streak",
    "Task",
    "User",
]
