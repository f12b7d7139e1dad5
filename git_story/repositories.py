from __future__ import annotations

import math
from datetime import datetime
from typing import List, Sequence, Tuple

from .config import RepoWeights
from .models import RepoRecord, Repository

DEFAULT_DESCRIPTION = "A project that speaks through its code."
NO_REPOSITORY = Repository(
    name="No Public Repos",
    description="Start coding to write history.",
    stars=0,
    language="N/A",
    topics=(),
    url="",
)
TOP_REPO_LIMIT = 5


def score_repository(
    repo: RepoRecord,
    weights: RepoWeights,
    year_start: datetime,
    year_end: datetime,
    now: datetime,
) -> float:
    """Hand-tuned desirability score; higher means a more notable project."""
    score = 0.0
    score += min(math.log10(repo.stars + 1) * weights.stars_log_multiplier, weights.stars_max_points)
    score += min(math.log10(repo.forks + 1) * weights.forks_log_multiplier, weights.forks_max_points)

    if repo.pushed_at is not None and repo.pushed_at >= year_start:
        days_since_push = max(0.0, (now - repo.pushed_at).total_seconds() / 86400)
        score += max(0.0, weights.recency_max_points - days_since_push / weights.recency_decay_days)

    if not repo.fork:
        score += weights.original_work
    if repo.description and len(repo.description.strip()) > 10:
        score += weights.has_description
    if repo.topics:
        score += weights.has_topics
    if repo.language:
        score += weights.has_language

    score += min(repo.watchers * weights.watchers_multiplier, weights.watchers_max)

    if repo.archived:
        score += weights.archived_penalty
    if repo.size > 0:
        score += min(math.log10(repo.size) * weights.size_log_multiplier, weights.size_max_points)
    if repo.open_issues > 0:
        score += min(math.log10(repo.open_issues + 1) * weights.open_issues_log_multiplier, weights.open_issues_max_points)

    if repo.created_at is not None and year_start <= repo.created_at < year_end:
        score += weights.created_in_year_bonus
    return score


def rank_repositories(
    repos: Sequence[RepoRecord],
    weights: RepoWeights,
    year_start: datetime,
    year_end: datetime,
    now: datetime,
) -> List[Tuple[RepoRecord, float]]:
    scored = [(repo, score_repository(repo, weights, year_start, year_end, now)) for repo in repos]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored


def to_display(repo: RepoRecord) -> Repository:
    language = repo.language or (repo.topics[0] if repo.topics else "Unknown")
    return Repository(
        name=repo.name,
        description=repo.description or DEFAULT_DESCRIPTION,
        stars=repo.stars,
        language=language,
        topics=tuple(repo.topics),
        url=repo.url,
    )


def select_top_repositories(
    repos: Sequence[RepoRecord],
    weights: RepoWeights,
    year_start: datetime,
    year_end: datetime,
    now: datetime,
) -> Tuple[Repository, List[Repository]]:
    ranked = rank_repositories(repos, weights, year_start, year_end, now)
    top = [to_display(repo) for repo, _ in ranked[:TOP_REPO_LIMIT]]
    return (top[0] if top else NO_REPOSITORY), top
