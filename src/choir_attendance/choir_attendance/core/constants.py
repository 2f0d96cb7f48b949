"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Deployments may override the scoring ones through settings.SCORING.
"""

from .enums import Category

MONTHLY_EXCUSE_CAP = 2
YEARLY_EXCUSE_ALLOWANCE = 24

TOP_PERFORMER_THRESHOLD = 90.0
NEEDS_ATTENTION_THRESHOLD = 70.0
RANKING_LIMIT = 10

REMINDER_HOUR = 21
UPCOMING_DAYS = 30

DEFAULT_LOG_LIMIT = 200

NAME_REQUIRED_CATEGORIES = frozenset(
    {
        Category.SPECIAL_MASS_PRACTICE,
        Category.SPECIAL_MASS,
        Category.OTHERS,
    }
)

NOT_MARKED = "Not Marked"
PLACEHOLDER = "-"
