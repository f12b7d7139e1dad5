from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, tzinfo
from typing import Dict, Iterable, List

from .adapters import GitHubRaw, Payload, RawStory, parse_timestamp
from .models import ActivityEvent, ActivityKind, ContributionBreakdown

logger = logging.getLogger(__name__)

_GITLAB_PUSH_ACTIONS = {"pushed to", "pushed new"}
_GITLAB_MR_OPENED = {"opened", "created"}
_GITLAB_MR_REVIEWED = {"accepted", "approved"}


def classify_github_event(event: Payload) -> tuple[ActivityKind, int]:
    event_type = event.get("type")
    payload = event.get("payload") or {}
    if event_type == "PushEvent":
        size = payload.get("size") or payload.get("distinct_size")
        return ActivityKind.COMMIT, int(size) if size else 1
    if event_type == "PullRequestEvent" and payload.get("action") == "opened":
        return ActivityKind.PULL_REQUEST, 1
    if event_type == "PullRequestReviewEvent":
        return ActivityKind.REVIEW, 1
    if event_type == "IssuesEvent":
        return ActivityKind.ISSUE, 1
    return ActivityKind.OTHER, 1


def classify_gitlab_event(event: Payload) -> tuple[ActivityKind, int]:
    action = event.get("action_name")
    target = event.get("target_type")
    commit_count = (event.get("push_data") or {}).get("commit_count")
    if commit_count:
        return ActivityKind.COMMIT, int(commit_count)
    if action in _GITLAB_PUSH_ACTIONS:
        return ActivityKind.COMMIT, 1
    if target == "MergeRequest":
        if action in _GITLAB_MR_OPENED:
            return ActivityKind.PULL_REQUEST, 1
        if action in _GITLAB_MR_REVIEWED:
            return ActivityKind.REVIEW, 1
        return ActivityKind.OTHER, 1
    if target == "Issue":
        return ActivityKind.ISSUE, 1
    return ActivityKind.OTHER, 1


def normalize_events(raw: RawStory, year: int, zone: tzinfo) -> List[ActivityEvent]:
    """Convert provider events into canonical events dated inside ``year``.

    Timestamps are shifted into ``zone`` before the year check, so the local
    calendar date decides which day an event belongs to.
    """
    classify = classify_github_event if isinstance(raw, GitHubRaw) else classify_gitlab_event
    events: List[ActivityEvent] = []
    skipped = 0
    for record in raw.events:
        timestamp = parse_timestamp(record.get("created_at"))
        if timestamp is None:
            skipped += 1
            continue
        local = timestamp.astimezone(zone)
        if local.year != year:
            skipped += 1
            continue
        kind, weight = classify(record)
        events.append(ActivityEvent(timestamp=local, kind=kind, weight=weight))
    if skipped:
        logger.debug("Dropped %d %s events outside %d", skipped, raw.provider, year)
    return events


def summarize_breakdown(events: Iterable[ActivityEvent]) -> ContributionBreakdown:
    totals: Dict[ActivityKind, int] = defaultdict(int)
    for event in events:
        totals[event.kind] += event.weight if event.kind is ActivityKind.COMMIT else 1
    return ContributionBreakdown(
        commits=totals[ActivityKind.COMMIT],
        prs=totals[ActivityKind.PULL_REQUEST],
        issues=totals[ActivityKind.ISSUE],
        reviews=totals[ActivityKind.REVIEW],
    )


def daily_counts(events: Iterable[ActivityEvent]) -> Dict[date, int]:
    counts: Dict[date, int] = defaultdict(int)
    for event in events:
        counts[event.timestamp.date()] += event.weight
    return dict(counts)
