"""Tagged raw provider payloads and their mapping onto the canonical model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from .models import Identity, RepoRecord

Payload = Dict[str, Any]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(slots=True)
class GitHubRaw:
    profile: Payload
    repositories: List[Payload] = field(default_factory=list)
    events: List[Payload] = field(default_factory=list)
    provider: str = "github"


@dataclass(slots=True)
class GitLabRaw:
    profile: Payload
    repositories: List[Payload] = field(default_factory=list)
    events: List[Payload] = field(default_factory=list)
    provider: str = "gitlab"


RawStory = Union[GitHubRaw, GitLabRaw]


def github_identity(profile: Payload) -> Identity:
    return Identity(
        username=str(profile.get("login", "")),
        user_id=int(profile.get("id", 0)),
        avatar_url=str(profile.get("avatar_url") or ""),
        created_at=parse_timestamp(profile.get("created_at")),
        followers=int(profile.get("followers") or 0),
        following=int(profile.get("following") or 0),
        public_repos=int(profile["public_repos"]) if profile.get("public_repos") is not None else None,
    )


def gitlab_identity(profile: Payload) -> Identity:
    # The /users?username= summary record has no follower counts.
    return Identity(
        username=str(profile.get("username", "")),
        user_id=int(profile.get("id", 0)),
        avatar_url=str(profile.get("avatar_url") or ""),
        created_at=parse_timestamp(profile.get("created_at")),
        followers=int(profile.get("followers") or 0),
        following=int(profile.get("following") or 0),
    )


def github_repository(payload: Payload) -> RepoRecord:
    return RepoRecord(
        name=str(payload.get("name", "")),
        description=payload.get("description"),
        stars=int(payload.get("stargazers_count") or 0),
        forks=int(payload.get("forks_count") or 0),
        watchers=int(payload.get("watchers_count") or 0),
        size=int(payload.get("size") or 0),
        open_issues=int(payload.get("open_issues_count") or 0),
        fork=bool(payload.get("fork", False)),
        archived=bool(payload.get("archived", False)),
        language=payload.get("language") or None,
        topics=tuple(payload.get("topics") or ()),
        url=str(payload.get("html_url", "")),
        created_at=parse_timestamp(payload.get("created_at")),
        pushed_at=parse_timestamp(payload.get("pushed_at")),
    )


def gitlab_repository(payload: Payload) -> RepoRecord:
    statistics = payload.get("statistics") or {}
    # Project listings carry no language; topics stand in for it downstream.
    return RepoRecord(
        name=str(payload.get("name", "")),
        description=payload.get("description"),
        stars=int(payload.get("star_count") or 0),
        forks=int(payload.get("forks_count") or 0),
        watchers=0,
        size=int(statistics.get("repository_size") or 0) // 1024,
        open_issues=int(payload.get("open_issues_count") or 0),
        fork="forked_from_project" in payload,
        archived=bool(payload.get("archived", False)),
        language=None,
        topics=tuple(payload.get("topics") or payload.get("tag_list") or ()),
        url=str(payload.get("web_url", "")),
        created_at=parse_timestamp(payload.get("created_at")),
        pushed_at=parse_timestamp(payload.get("last_activity_at")),
    )


def to_identity(raw: RawStory) -> Identity:
    if isinstance(raw, GitHubRaw):
        return github_identity(raw.profile)
    return gitlab_identity(raw.profile)


def to_repositories(raw: RawStory) -> List[RepoRecord]:
    mapper = github_repository if isinstance(raw, GitHubRaw) else gitlab_repository
    return [mapper(payload) for payload in raw.repositories]
