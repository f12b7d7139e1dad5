from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Identity:
    username: str
    user_id: int
    avatar_url: str
    created_at: Optional[datetime]
    followers: int = 0
    following: int = 0
    public_repos: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RepoRecord:
    name: str
    description: Optional[str]
    stars: int
    forks: int
    watchers: int
    size: int
    open_issues: int
    fork: bool
    archived: bool
    language: Optional[str]
    topics: Tuple[str, ...]
    url: str
    created_at: Optional[datetime]
    pushed_at: Optional[datetime]


class ActivityKind(str, Enum):
    COMMIT = "commit"
    PULL_REQUEST = "pull_request"
    ISSUE = "issue"
    REVIEW = "review"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ActivityEvent:
    timestamp: datetime
    kind: ActivityKind
    weight: int = 1


@dataclass(frozen=True, slots=True)
class Contribution:
    date: date
    count: int


@dataclass(frozen=True, slots=True)
class ContributionBreakdown:
    commits: int = 0
    prs: int = 0
    issues: int = 0
    reviews: int = 0

    @property
    def total(self) -> int:
        return self.commits + self.prs + self.issues + self.reviews


@dataclass(frozen=True, slots=True)
class Language:
    name: str
    count: int
    percentage: int
    color: str


@dataclass(frozen=True, slots=True)
class Repository:
    name: str
    description: str
    stars: int
    language: str
    topics: Tuple[str, ...]
    url: str


@dataclass(frozen=True, slots=True)
class CommunityStats:
    followers: int
    following: int
    public_repos: int
    total_stars: int


@dataclass(frozen=True, slots=True)
class Productivity:
    time_of_day: str
    peak_hour: int


@dataclass(frozen=True, slots=True)
class VelocityPoint:
    label: str
    commits: int


@dataclass(frozen=True, slots=True)
class CalendarSummary:
    contributions: Tuple[Contribution, ...]
    total: int
    longest_streak: int
    weekday_stats: Tuple[int, ...]
    busiest_day: str
    velocity: Tuple[VelocityPoint, ...]


@dataclass(frozen=True, slots=True)
class Achievement:
    name: str
    category: str
    icon: str


@dataclass(frozen=True, slots=True)
class StoryResult:
    username: str
    avatar_url: str
    joined_at: Optional[datetime]
    year: int
    total_commits: int
    longest_streak: int
    busiest_day: str
    top_languages: Tuple[Language, ...]
    top_repo: Repository
    top_repos: Tuple[Repository, ...]
    velocity: Tuple[VelocityPoint, ...]
    weekday_stats: Tuple[int, ...]
    productivity: Productivity
    archetype: str
    breakdown: ContributionBreakdown
    community: CommunityStats
    contributions: Tuple[Contribution, ...]
    provider: str
    grade: str
    achievements: Tuple[Achievement, ...] = field(default_factory=tuple)
    badges: Tuple[Achievement, ...] = field(default_factory=tuple)
