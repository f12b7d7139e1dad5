from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError


DEFAULT_CONFIG_PATH = Path("config/settings.yaml")
PROVIDERS = ("github", "gitlab")


@dataclass(slots=True)
class StoryConfig:
    year: int = 2025
    timezone: str = "UTC"
    demo_delay_seconds: float = 1.5


@dataclass(slots=True)
class ProviderConfig:
    api_root: str
    token_env: str
    max_repo_pages: int = 10
    max_event_pages: int = 10
    timeout: float = 30.0


@dataclass(frozen=True, slots=True)
class LanguageWeights:
    base_weight: float = 1.0
    recent_activity_bonus: float = 1.0
    diversity_threshold: int = 3
    diversity_bonus: float = 0.5
    top_n: int = 3


@dataclass(frozen=True, slots=True)
class RepoWeights:
    stars_log_multiplier: float = 10.0
    stars_max_points: float = 30.0
    forks_log_multiplier: float = 5.0
    forks_max_points: float = 15.0
    recency_max_points: float = 25.0
    recency_decay_days: float = 15.0
    original_work: float = 15.0
    has_description: float = 5.0
    has_topics: float = 5.0
    has_language: float = 3.0
    watchers_multiplier: float = 0.5
    watchers_max: float = 5.0
    archived_penalty: float = -20.0
    size_log_multiplier: float = 3.0
    size_max_points: float = 15.0
    open_issues_log_multiplier: float = 4.0
    open_issues_max_points: float = 8.0
    created_in_year_bonus: float = 10.0


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    language: LanguageWeights = field(default_factory=LanguageWeights)
    repo: RepoWeights = field(default_factory=RepoWeights)


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(slots=True)
class OutputConfig:
    directory: Path = Path("reports")
    format: str = "markdown"


def _default_providers() -> Dict[str, ProviderConfig]:
    return {
        "github": ProviderConfig(api_root="https://api.github.com", token_env="GITHUB_TOKEN"),
        "gitlab": ProviderConfig(api_root="https://gitlab.com/api/v4", token_env="GITLAB_TOKEN"),
    }


@dataclass(slots=True)
class AppConfig:
    story: StoryConfig = field(default_factory=StoryConfig)
    providers: Dict[str, ProviderConfig] = field(default_factory=_default_providers)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def provider(self, name: str) -> ProviderConfig:
        try:
            return self.providers[name]
        except KeyError:
            raise ConfigurationError(f"Unknown provider '{name}', expected one of: {', '.join(PROVIDERS)}") from None


def load_config(path: Optional[Path] = None) -> AppConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return AppConfig()

    with config_path.open("r", encoding="utf-8") as handle:
        raw: Dict[str, Any] = yaml.safe_load(handle) or {}

    story_raw = raw.get("story", {})
    providers_raw = raw.get("providers", {})
    scoring_raw = raw.get("scoring", {})
    logging_raw = raw.get("logging", {})
    output_raw = raw.get("output", {})

    providers = _default_providers()
    for name, defaults in providers.items():
        section = providers_raw.get(name, {})
        providers[name] = ProviderConfig(
            api_root=str(section.get("api_root", defaults.api_root)).rstrip("/"),
            token_env=str(section.get("token_env", defaults.token_env)),
            max_repo_pages=int(section.get("max_repo_pages", defaults.max_repo_pages)),
            max_event_pages=int(section.get("max_event_pages", defaults.max_event_pages)),
            timeout=float(section.get("timeout", defaults.timeout)),
        )

    config = AppConfig(
        story=StoryConfig(
            year=int(story_raw.get("year", 2025)),
            timezone=str(story_raw.get("timezone", "UTC")),
            demo_delay_seconds=float(story_raw.get("demo_delay_seconds", 1.5)),
        ),
        providers=providers,
        scoring=ScoringConfig(
            language=_build_weights(LanguageWeights, scoring_raw.get("language", {})),
            repo=_build_weights(RepoWeights, scoring_raw.get("repo", {})),
        ),
        logging=LoggingConfig(level=str(logging_raw.get("level", "INFO")).upper()),
        output=OutputConfig(
            directory=Path(output_raw.get("directory", "reports")),
            format=str(output_raw.get("format", "markdown")),
        ),
    )

    return config


def _build_weights(cls, section: Dict[str, Any]):
    known = cls.__dataclass_fields__
    unknown = sorted(set(section) - set(known))
    if unknown:
        raise ConfigurationError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")
    defaults = cls()
    values = {name: _coerce_weight(cls, name, getattr(defaults, name), section[name]) for name in section}
    return cls(**values)


def _coerce_weight(cls, name: str, default: Any, value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{cls.__name__}.{name} must be a number, got {value!r}")
    if isinstance(default, int):
        if isinstance(value, float) and not value.is_integer():
            raise ConfigurationError(f"{cls.__name__}.{name} must be a whole number, got {value!r}")
        return int(value)
    return float(value)


def resolve_token(config: AppConfig, provider: str, token: Optional[str] = None, authenticated: bool = False) -> Optional[str]:
    """Return the bearer token for a request, or None for anonymous access.

    Authenticated flows fall back to the provider's ``token_env`` variable and
    fail with ConfigurationError when no usable credential is found.
    """
    provider_config = config.provider(provider)
    if token is not None:
        if not token.strip():
            raise ConfigurationError(f"Empty {provider} token supplied")
        return token.strip()
    if not authenticated:
        return None
    env_token = os.getenv(provider_config.token_env, "").strip()
    if not env_token:
        raise ConfigurationError(
            f"Authenticated {provider} access requires a token; set {provider_config.token_env}"
        )
    return env_token
