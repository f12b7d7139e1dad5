from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, List

from .config import AppConfig
from .models import StoryResult


def write_report(story: StoryResult, config: AppConfig) -> Path:
    output_dir = config.output.directory
    output_dir.mkdir(parents=True, exist_ok=True)
    if config.output.format == "json":
        report_path = output_dir / f"{story.username}-{story.year}-story.json"
        report_path.write_text(render_json(story), encoding="utf-8")
    else:
        report_path = output_dir / f"{story.username}-{story.year}-story.md"
        report_path.write_text(render_markdown(story), encoding="utf-8")
    return report_path


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Unserialisable value: {value!r}")


def render_json(story: StoryResult) -> str:
    return json.dumps(asdict(story), default=_json_default, indent=2)


def render_markdown(story: StoryResult) -> str:
    lines: List[str] = []
    lines.append(f"# {story.year} Story: {story.username}")
    lines.append("")
    lines.append(f"Provider: {story.provider}")
    if story.joined_at:
        lines.append(f"Joined: {story.joined_at.date().isoformat()}")
    lines.append("")
    lines.append(f"## {story.archetype}")
    lines.append(f"Grade: {story.grade}")
    lines.append("")
    lines.append("## Activity")
    lines.append(f"- Contributions: {story.total_commits}")
    lines.append(f"- Longest streak: {story.longest_streak} days")
    lines.append(f"- Busiest day: {story.busiest_day}")
    lines.append(f"- Peak hour: {story.productivity.peak_hour:02d}:00 ({story.productivity.time_of_day})")
    breakdown = story.breakdown
    lines.append(
        f"- Breakdown: commits {breakdown.commits}, pull requests {breakdown.prs}, "
        f"issues {breakdown.issues}, reviews {breakdown.reviews}"
    )
    lines.append("")
    lines.append("## Languages")
    lines.append(", ".join(f"{language.name} {language.percentage}%" for language in story.top_languages))
    lines.append("")
    lines.append("## Top Projects")
    if story.top_repos:
        lines.append("| Project | Stars | Language | Link |")
        lines.append("| --- | --- | --- | --- |")
        for repo in story.top_repos:
            lines.append(f"| {repo.name} | {repo.stars} | {repo.language} | {repo.url} |")
    else:
        lines.append("No repositories found.")
    lines.append("")
    community = story.community
    lines.append("## Community")
    lines.append(
        f"followers {community.followers}, following {community.following}, "
        f"repositories {community.public_repos}, stars {community.total_stars}"
    )
    if story.achievements:
        lines.append("")
        lines.append("## Achievements")
        lines.extend(f"- {achievement.name} ({achievement.category})" for achievement in story.achievements)
    if story.badges:
        lines.append("")
        lines.append("## Badges")
        lines.extend(f"- {badge.name} ({badge.category})" for badge in story.badges)
    return "\n".join(lines) + "\n"
