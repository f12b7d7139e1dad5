"""Fixed GitHub-shaped dataset served for the reserved ``demo`` identity."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone
from typing import List

from .adapters import GitHubRaw, Payload

DEMO_USERNAME = "demo"
_SEED = 4242
_HOURS = (9, 10, 11, 14, 15, 16, 20, 21, 21, 22, 23)


def is_demo(username: str) -> bool:
    return username.strip().lower() == DEMO_USERNAME


def demo_now(year: int) -> datetime:
    return datetime(year, 12, 31, 12, 0, tzinfo=timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _profile() -> Payload:
    return {
        "login": "demo",
        "id": 1,
        "avatar_url": "https://avatars.githubusercontent.com/u/9919?v=4",
        "created_at": "2016-04-12T08:30:00Z",
        "followers": 128,
        "following": 42,
        "public_repos": 6,
    }


def _repositories(year: int) -> List[Payload]:
    def repo(name, language, stars, forks, pushed, created, **extra):
        payload = {
            "name": name,
            "html_url": f"https://github.com/demo/{name}",
            "description": extra.pop("description", None),
            "language": language,
            "stargazers_count": stars,
            "watchers_count": stars,
            "forks_count": forks,
            "size": extra.pop("size", 0),
            "open_issues_count": extra.pop("open_issues", 0),
            "fork": extra.pop("fork", False),
            "archived": extra.pop("archived", False),
            "topics": extra.pop("topics", []),
            "pushed_at": pushed,
            "created_at": created,
        }
        payload.update(extra)
        return payload

    return [
        repo(
            "story-engine",
            "Python",
            342,
            27,
            f"{year}-12-20T18:04:00Z",
            f"{year}-02-11T10:00:00Z",
            description="Turns a year of commits into a narrative.",
            topics=["analytics", "git"],
            size=4800,
            open_issues=12,
        ),
        repo(
            "pixel-garden",
            "TypeScript",
            57,
            6,
            f"{year}-10-02T21:40:00Z",
            f"{year - 2}-06-01T09:15:00Z",
            description="Generative art playground for the browser.",
            topics=["generative-art"],
            size=2100,
            open_issues=3,
        ),
        repo(
            "dotfiles",
            "Shell",
            9,
            1,
            f"{year}-08-14T07:55:00Z",
            f"{year - 6}-01-20T12:00:00Z",
            size=140,
        ),
        repo(
            "rusty-queue",
            "Rust",
            18,
            2,
            f"{year - 1}-11-03T16:20:00Z",
            f"{year - 1}-03-09T16:20:00Z",
            description="A small persistent job queue.",
            size=900,
        ),
        repo(
            "data-notebooks",
            "Python",
            4,
            0,
            f"{year}-05-30T13:00:00Z",
            f"{year - 3}-09-12T13:00:00Z",
            archived=True,
            size=12000,
        ),
        repo(
            "awesome-lists",
            "Python",
            0,
            0,
            f"{year - 2}-01-01T00:00:00Z",
            f"{year - 2}-01-01T00:00:00Z",
            fork=True,
        ),
    ]


def _events(year: int) -> List[Payload]:
    rng = random.Random(_SEED)
    events: List[Payload] = []
    day = date(year, 1, 1)
    active_days = 0
    while day.year == year:
        if rng.random() < 0.72:
            active_days += 1
            moment = datetime(day.year, day.month, day.day, rng.choice(_HOURS), rng.randint(0, 59), tzinfo=timezone.utc)
            events.append({"type": "PushEvent", "created_at": _iso(moment), "payload": {"size": rng.randint(1, 5)}})
            if active_days % 6 == 0:
                events.append(
                    {"type": "PullRequestEvent", "created_at": _iso(moment), "payload": {"action": "opened"}}
                )
            if active_days % 9 == 0:
                events.append(
                    {"type": "PullRequestReviewEvent", "created_at": _iso(moment), "payload": {"action": "created"}}
                )
            if active_days % 15 == 0:
                events.append({"type": "IssuesEvent", "created_at": _iso(moment), "payload": {"action": "opened"}})
        day += timedelta(days=1)
    return events


def demo_raw(year: int) -> GitHubRaw:
    return GitHubRaw(profile=_profile(), repositories=_repositories(year), events=_events(year))
