"""Overall grade, achievements and tiered badges.

Achievements are independent predicates: every one that holds is awarded.
Badges are grouped by category and only the highest tier of each category
is awarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .models import Achievement, CommunityStats, ContributionBreakdown, Repository

Tiers = Sequence[Tuple[int, float]]

COMMIT_POINTS: Tiers = ((2000, 30), (1000, 25), (500, 20), (200, 15), (100, 10), (50, 5))
STREAK_POINTS: Tiers = ((100, 20), (50, 15), (30, 12), (15, 8), (7, 5))
PR_POINTS: Tiers = ((100, 15), (50, 12), (20, 9), (10, 6), (5, 3))
REVIEW_POINTS: Tiers = ((50, 10), (20, 8), (10, 5), (5, 3))
ISSUE_POINTS: Tiers = ((30, 5), (10, 3), (5, 2))
REPO_POINTS: Tiers = ((50, 10), (20, 7), (10, 5), (5, 3), (1, 1))
COMMUNITY_MAX_POINTS = 10

GRADE_BREAKPOINTS = ((90, "A+"), (80, "A"), (70, "B"), (60, "C"), (50, "D"))


@dataclass(frozen=True, slots=True)
class GradeInputs:
    breakdown: ContributionBreakdown
    community: CommunityStats
    total_commits: int
    longest_streak: int
    public_repos: int
    top_repos: Tuple[Repository, ...] = ()


def _tier_points(value: int, tiers: Tiers) -> float:
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


def grade_score(inputs: GradeInputs) -> float:
    breakdown = inputs.breakdown
    community = inputs.community
    score = 0.0
    score += _tier_points(inputs.total_commits, COMMIT_POINTS)
    score += _tier_points(inputs.longest_streak, STREAK_POINTS)
    score += _tier_points(breakdown.prs, PR_POINTS)
    score += _tier_points(breakdown.reviews, REVIEW_POINTS)
    score += _tier_points(breakdown.issues, ISSUE_POINTS)
    score += min(community.followers / 10 + community.total_stars / 50, COMMUNITY_MAX_POINTS)
    score += _tier_points(inputs.public_repos, REPO_POINTS)
    return score


def letter_grade(score: float) -> str:
    for threshold, grade in GRADE_BREAKPOINTS:
        if score >= threshold:
            return grade
    return "F"


def calculate_grade(inputs: GradeInputs) -> str:
    return letter_grade(grade_score(inputs))


Predicate = Callable[[GradeInputs], bool]

ACHIEVEMENTS: List[Tuple[Predicate, Achievement]] = [
    (
        lambda i: any(repo.stars >= 16 for repo in i.top_repos),
        Achievement("Starstruck", "Repository", "Star"),
    ),
    (lambda i: i.breakdown.prs >= 2, Achievement("Pull Shark", "Collaboration", "GitPullRequest")),
    (
        lambda i: i.breakdown.issues >= 5 or i.breakdown.reviews >= 10,
        Achievement("Galaxy Brain", "Community", "Lightbulb"),
    ),
    (lambda i: i.breakdown.prs >= 10, Achievement("Quickdraw", "Speed", "Zap")),
    (
        lambda i: i.breakdown.prs >= 5 and i.breakdown.reviews >= 5,
        Achievement("Pair Extraordinaire", "Collaboration", "Users"),
    ),
    (lambda i: i.breakdown.prs >= 20, Achievement("YOLO", "Risk", "Rocket")),
    (
        lambda i: i.breakdown.issues >= 3 or i.breakdown.reviews >= 5,
        Achievement("Heart On Your Sleeve", "Engagement", "Heart"),
    ),
    (
        lambda i: i.public_repos >= 5 or (i.breakdown.prs >= 3 and i.public_repos >= 1),
        Achievement("Open Sourcerer", "Open Source", "Sparkles"),
    ),
]


def earned_achievements(inputs: GradeInputs) -> List[Achievement]:
    return [achievement for predicate, achievement in ACHIEVEMENTS if predicate(inputs)]


BadgeTiers = Sequence[Tuple[int, str, str]]

# (metric, category, tiers ordered from highest to lowest threshold)
BADGE_LADDERS: List[Tuple[Callable[[GradeInputs], int], str, BadgeTiers]] = [
    (
        lambda i: i.total_commits,
        "Commits",
        (
            (2000, "Master Committer", "trophy"),
            (1000, "Heavy Committer", "muscle"),
            (500, "Active Committer", "zap"),
            (200, "Regular Contributor", "memo"),
        ),
    ),
    (
        lambda i: i.longest_streak,
        "Consistency",
        (
            (100, "Streak Legend", "fire"),
            (50, "Streak Master", "star"),
            (30, "Streak Champion", "medal"),
            (15, "Consistent Coder", "calendar"),
        ),
    ),
    (
        lambda i: i.breakdown.prs,
        "Collaboration",
        ((100, "PR Powerhouse", "rocket"), (50, "PR Pro", "briefcase"), (20, "Collaborator", "handshake")),
    ),
    (
        lambda i: i.breakdown.reviews,
        "Quality",
        ((50, "Code Reviewer", "eye"), (20, "Quality Guardian", "shield")),
    ),
    (
        lambda i: i.breakdown.issues,
        "Problem Solving",
        ((30, "Issue Solver", "wrench"), (10, "Problem Reporter", "clipboard")),
    ),
    (
        lambda i: i.community.total_stars,
        "Community",
        ((500, "Star Magnet", "star"), (100, "Popular Repo", "glowing-star")),
    ),
    (
        lambda i: i.community.followers,
        "Community",
        ((200, "Community Leader", "crown"), (50, "Growing Influence", "chart")),
    ),
    (
        lambda i: i.public_repos,
        "Projects",
        ((50, "Repo Collector", "package"), (20, "Multi-Project", "folders"), (10, "Project Starter", "rocket")),
    ),
]

WELL_ROUNDED = Achievement("Well-Rounded Developer", "Overall", "target")


def earned_badges(inputs: GradeInputs) -> List[Achievement]:
    badges: List[Achievement] = []
    for metric, category, tiers in BADGE_LADDERS:
        value = metric(inputs)
        for threshold, name, icon in tiers:
            if value >= threshold:
                badges.append(Achievement(name, category, icon))
                break
    breakdown = inputs.breakdown
    if breakdown.commits > 0 and breakdown.prs > 0 and breakdown.reviews > 0 and breakdown.issues > 0:
        badges.append(WELL_ROUNDED)
    return badges
