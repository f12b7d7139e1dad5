from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .models import CommunityStats, ContributionBreakdown, Productivity

DEFAULT_ARCHETYPE = "The Curious Explorer"


@dataclass(frozen=True, slots=True)
class ArchetypeSignals:
    pr_share: float
    review_share: float
    issue_share: float
    weekend_share: float
    peak_hour: int
    total_activity: int
    followers: int
    total_stars: int


def _share(part: int, total: int) -> float:
    return part / total * 100 if total > 0 else 0.0


def build_signals(
    breakdown: ContributionBreakdown,
    community: CommunityStats,
    total_activity: int,
    productivity: Productivity,
    weekday_stats: Sequence[int],
) -> ArchetypeSignals:
    denominator = breakdown.total
    week_total = sum(weekday_stats)
    weekend = weekday_stats[0] + weekday_stats[6]
    return ArchetypeSignals(
        pr_share=_share(breakdown.prs, denominator),
        review_share=_share(breakdown.reviews, denominator),
        issue_share=_share(breakdown.issues, denominator),
        weekend_share=_share(weekend, week_total),
        peak_hour=productivity.peak_hour,
        total_activity=total_activity,
        followers=community.followers,
        total_stars=community.total_stars,
    )


# Evaluated top to bottom; the first matching rule decides the archetype.
ARCHETYPE_RULES: List[Tuple[Callable[[ArchetypeSignals], bool], str]] = [
    (lambda s: s.pr_share > 20, "The Collaboration Maestro"),
    (lambda s: s.review_share > 10, "The Quality Guardian"),
    (lambda s: s.peak_hour >= 22 or s.peak_hour <= 4, "The Midnight Architect"),
    (lambda s: 5 <= s.peak_hour <= 11, "The Dawn Coder"),
    (lambda s: s.weekend_share > 35, "The Passion Programmer"),
    (lambda s: s.total_activity >= 1200, "The Relentless Builder"),
    (lambda s: s.total_activity >= 400, "The Steady Craftsman"),
    (lambda s: s.issue_share > 15, "The Visionary Planner"),
    (lambda s: s.followers >= 500 or s.total_stars >= 1000, "The Open Source Star"),
]


def classify_archetype(signals: ArchetypeSignals) -> str:
    for predicate, label in ARCHETYPE_RULES:
        if predicate(signals):
            return label
    return DEFAULT_ARCHETYPE


def calculate_archetype(
    breakdown: ContributionBreakdown,
    community: CommunityStats,
    total_activity: int,
    productivity: Productivity,
    weekday_stats: Sequence[int],
) -> str:
    return classify_archetype(build_signals(breakdown, community, total_activity, productivity, weekday_stats))
