from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from .adapters import RawStory, to_identity, to_repositories
from .archetype import calculate_archetype
from .config import AppConfig, resolve_token
from .demo import demo_now, demo_raw, is_demo
from .errors import ConfigurationError
from .grading import GradeInputs, calculate_grade, earned_achievements, earned_badges
from .languages import top_languages
from .models import CommunityStats, StoryResult
from .normalizer import daily_counts, normalize_events, summarize_breakdown
from .productivity import calculate_productivity, hour_histogram
from .providers import create_client
from .repositories import select_top_repositories
from .streaks import summarize_calendar

logger = logging.getLogger(__name__)


def _zone(config: AppConfig) -> tzinfo:
    if config.story.timezone.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(config.story.timezone)
    except (ZoneInfoNotFoundError, ValueError) as error:
        raise ConfigurationError(f"Unknown timezone '{config.story.timezone}'") from error


def build_story(raw: RawStory, config: AppConfig, now: datetime) -> StoryResult:
    """Derive the full year story from already retrieved provider data."""
    year = config.story.year
    zone = _zone(config)
    year_start = datetime(year, 1, 1, tzinfo=zone)
    year_end = datetime(year + 1, 1, 1, tzinfo=zone)

    identity = to_identity(raw)
    repos = to_repositories(raw)
    events = normalize_events(raw, year, zone)

    breakdown = summarize_breakdown(events)
    calendar = summarize_calendar(year, daily_counts(events))
    languages = top_languages(repos, config.scoring.language, year_start, year_end)
    top_repo, top_repos = select_top_repositories(repos, config.scoring.repo, year_start, year_end, now)
    productivity = calculate_productivity(hour_histogram(events))

    community = CommunityStats(
        followers=identity.followers,
        following=identity.following,
        public_repos=identity.public_repos if identity.public_repos is not None else len(repos),
        total_stars=sum(repo.stars for repo in repos),
    )
    archetype = calculate_archetype(breakdown, community, calendar.total, productivity, calendar.weekday_stats)
    inputs = GradeInputs(
        breakdown=breakdown,
        community=community,
        total_commits=calendar.total,
        longest_streak=calendar.longest_streak,
        public_repos=community.public_repos,
        top_repos=tuple(top_repos),
    )

    return StoryResult(
        username=identity.username,
        avatar_url=identity.avatar_url,
        joined_at=identity.created_at,
        year=year,
        total_commits=calendar.total,
        longest_streak=calendar.longest_streak,
        busiest_day=calendar.busiest_day,
        top_languages=tuple(languages),
        top_repo=top_repo,
        top_repos=tuple(top_repos),
        velocity=calendar.velocity,
        weekday_stats=calendar.weekday_stats,
        productivity=productivity,
        archetype=archetype,
        breakdown=breakdown,
        community=community,
        contributions=calendar.contributions,
        provider=raw.provider,
        grade=calculate_grade(inputs),
        achievements=tuple(earned_achievements(inputs)),
        badges=tuple(earned_badges(inputs)),
    )


async def generate_story(
    username: str,
    provider: str = "github",
    token: Optional[str] = None,
    authenticated: bool = False,
    config: Optional[AppConfig] = None,
    now: Optional[datetime] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StoryResult:
    """Produce the year story for ``username`` on ``provider``.

    The reserved ``demo`` identity skips the network and runs a fixed
    fixture through the same pipeline. Profile lookup failures abort the
    whole operation; repository and event listings keep whatever pages
    arrived before a failure.
    """
    config = config or AppConfig()
    year = config.story.year

    if is_demo(username):
        await asyncio.sleep(config.story.demo_delay_seconds)
        return build_story(demo_raw(year), config, now=now or demo_now(year))

    provider_config = config.provider(provider)
    bearer = resolve_token(config, provider, token=token, authenticated=authenticated)
    _zone(config)

    logger.info("Building %d story for %s on %s", year, username, provider)
    async with create_client(provider, provider_config, token=bearer, transport=transport) as client:
        profile = await client.fetch_profile(username)
        repositories, events = await asyncio.gather(
            client.fetch_repositories(client.owner_ref(profile)),
            client.fetch_events(username, date(year, 1, 1), date(year, 12, 31)),
        )
        raw = client.wrap(profile, repositories, events)

    logger.info("Fetched %d repositories and %d events for %s", len(repositories), len(events), username)
    return build_story(raw, config, now=now or datetime.now(timezone.utc))
