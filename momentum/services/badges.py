from __future__ import annotations

import warnings

from momentum.models.enums import BadgeTier


# Highest first; the first threshold the percentage reaches wins.
BADGE_THRESHOLDS: tuple[tuple[BadgeTier, float], ...] = (
    (BadgeTier.gold, 80.0),
    (BadgeTier.silver, 70.0),
    (BadgeTier.bronze, 60.0),
    (BadgeTier.shameful, 0.0),
)

BADGE_STYLES: dict[BadgeTier, dict[str, str]] = {
    BadgeTier.gold: {"color": "#FFD700", "emoji": "🥇"},
    BadgeTier.silver: {"color": "#C0C0C0", "emoji": "🥈"},
    BadgeTier.bronze: {"color": "#CD7F32", "emoji": "🥉"},
    BadgeTier.shameful: {"color": "#6B7280", "emoji": "😔"},
}

PLATINUM_DISPLAY_MIN = 95.0


def badge_tier(percentage: float) -> BadgeTier:
    for tier, minimum in BADGE_THRESHOLDS:
        if percentage >= minimum:
            return tier
    return BadgeTier.shameful


def badge_style(tier: BadgeTier | str) -> dict[str, str]:
    try:
        return BADGE_STYLES[BadgeTier(tier)]
    except ValueError:
        return BADGE_STYLES[BadgeTier.shameful]


def display_tier(percentage: float) -> str:
    """
    Five-tier label (adds "platinum" at 95 %) used by older dashboards.

    Deprecated: summaries, badges and streaks only ever use ``badge_tier``.
    """
    warnings.warn(
        "display_tier() is a presentation-only five-tier table; use badge_tier()",
        DeprecationWarning,
        stacklevel=2,
    )
    if percentage >= PLATINUM_DISPLAY_MIN:
        return "platinum"
    return badge_tier(percentage).value
