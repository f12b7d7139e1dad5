from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from .config import LanguageWeights
from .models import Language, RepoRecord

DEFAULT_COLOR = "#A3A3A3"
POLYGLOT = Language(name="Polyglot", count=1, percentage=100, color="#FFFFFF")

LANGUAGE_COLORS: Dict[str, str] = {
    "TypeScript": "#3178C6",
    "JavaScript": "#F7DF1E",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "Vue": "#41b883",
    "Svelte": "#ff3e00",
    "SCSS": "#c6538c",
    "Astro": "#ff5a03",
    "Rust": "#dea584",
    "C": "#555555",
    "C++": "#f34b7d",
    "C#": "#178600",
    "Go": "#00ADD8",
    "Zig": "#f7a41d",
    "Assembly": "#6E4C13",
    "Objective-C": "#438eff",
    "Java": "#b07219",
    "Kotlin": "#A97BFF",
    "Scala": "#c22d40",
    "Groovy": "#4298b8",
    "Clojure": "#db5855",
    "Python": "#3572A5",
    "Ruby": "#701516",
    "PHP": "#4F5D95",
    "Perl": "#0298c3",
    "Lua": "#000080",
    "R": "#198CE7",
    "Julia": "#a270ba",
    "Elixir": "#6e4a7e",
    "Erlang": "#B83998",
    "Haskell": "#5e5086",
    "OCaml": "#3be133",
    "Swift": "#F05138",
    "Dart": "#00B4AB",
    "Jupyter Notebook": "#DA5B0B",
    "MATLAB": "#e16737",
    "Shell": "#89e051",
    "PowerShell": "#012456",
    "Dockerfile": "#384d54",
    "Makefile": "#427819",
    "Nix": "#7e7eff",
    "HCL": "#844fba",
    "SQL": "#e38c00",
    "PLpgSQL": "#336790",
    "GraphQL": "#e10098",
    "Markdown": "#083fa1",
    "TeX": "#3D6117",
    "F#": "#b845fc",
    "Crystal": "#000100",
    "Nim": "#ffc200",
    "Solidity": "#AA6746",
    "WebAssembly": "#654ff0",
    "CoffeeScript": "#244776",
    "Elm": "#60B5CC",
    "Fortran": "#4d41b1",
    "COBOL": "#005ca5",
}


@dataclass(slots=True)
class LanguageScore:
    name: str
    weight: float = 0.0
    repo_count: int = 0
    recent_count: int = 0


def _language_label(repo: RepoRecord) -> Optional[str]:
    return repo.language


def _topic_label(repo: RepoRecord) -> Optional[str]:
    return repo.topics[0] if repo.topics else None


def calculate_language_scores(
    repos: Sequence[RepoRecord],
    weights: LanguageWeights,
    year_start: datetime,
    year_end: datetime,
    label: Callable[[RepoRecord], Optional[str]] = _language_label,
) -> Dict[str, LanguageScore]:
    scores: Dict[str, LanguageScore] = {}
    for repo in repos:
        if repo.fork:
            continue
        name = label(repo)
        if not name:
            continue
        recent = repo.pushed_at is not None and year_start <= repo.pushed_at < year_end
        score = scores.setdefault(name, LanguageScore(name=name))
        score.repo_count += 1
        score.weight += weights.base_weight
        if recent:
            score.recent_count += 1
            score.weight += weights.recent_activity_bonus

    for score in scores.values():
        if score.repo_count >= weights.diversity_threshold:
            score.weight += (score.repo_count - weights.diversity_threshold) * weights.diversity_bonus
    return scores


def rank_languages(scores: Dict[str, LanguageScore], top_n: int) -> List[LanguageScore]:
    return sorted(scores.values(), key=lambda score: score.weight, reverse=True)[:top_n]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_percentages(ranked: Sequence[LanguageScore]) -> List[Language]:
    total_weight = sum(score.weight for score in ranked)
    if not ranked or total_weight <= 0:
        return [POLYGLOT]
    languages = [
        Language(
            name=score.name,
            count=score.repo_count,
            percentage=_round_half_up(score.weight / total_weight * 100),
            color=LANGUAGE_COLORS.get(score.name, DEFAULT_COLOR),
        )
        for score in ranked
    ]
    remainder = 100 - sum(language.percentage for language in languages)
    if remainder:
        top = languages[0]
        languages[0] = Language(top.name, top.count, top.percentage + remainder, top.color)
    return languages


def top_languages(
    repos: Sequence[RepoRecord],
    weights: LanguageWeights,
    year_start: datetime,
    year_end: datetime,
) -> List[Language]:
    """Top languages as integer percentages that always sum to 100.

    Repositories without language metadata (GitLab project listings) are
    labelled by their first topic instead; with neither, the result is a
    single Polyglot entry.
    """
    has_languages = any(repo.language for repo in repos if not repo.fork)
    label = _language_label if has_languages else _topic_label
    scores = calculate_language_scores(repos, weights, year_start, year_end, label=label)
    return to_percentages(rank_languages(scores, weights.top_n))
