from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .adapters import GitHubRaw, GitLabRaw, Payload, RawStory
from .config import ProviderConfig
from .errors import ProviderError, UserNotFoundError

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
_USER_AGENT = "git-story/0.1"
_LABELS = {"github": "GitHub", "gitlab": "GitLab"}


@dataclass(slots=True)
class ProviderSession:
    http: httpx.AsyncClient
    provider: str

    @classmethod
    def create(
        cls,
        provider: str,
        config: ProviderConfig,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ProviderSession":
        headers = {"User-Agent": _USER_AGENT}
        if provider == "github":
            headers["Accept"] = "application/vnd.github+json"
        if token:
            headers["Authorization"] = f"Bearer {token}"
        http = httpx.AsyncClient(
            base_url=config.api_root,
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        )
        return cls(http=http, provider=provider)

    @property
    def label(self) -> str:
        return _LABELS.get(self.provider, self.provider)

    async def close(self) -> None:
        await self.http.aclose()


def _response_message(response: httpx.Response) -> str:
    if response.headers.get("Content-Type", "").startswith("application/json"):
        try:
            body = response.json()
        except ValueError:
            return response.text.strip()
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
    return response.text.strip()


def _decode(session: ProviderSession, response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as error:
        raise ProviderError(
            f"{session.label} API returned an unreadable body (HTTP {response.status_code})",
            status_code=response.status_code,
        ) from error


def _raise_for_status(session: ProviderSession, response: httpx.Response) -> None:
    if response.is_success:
        return
    message = _response_message(response)
    # GitLab throttles with a bare 429 "Retry later"; GitHub uses 403 or 429 with a message.
    if response.status_code == 429 or (response.status_code == 403 and "rate limit" in message.lower()):
        raise ProviderError(f"{session.label} API rate limit exceeded", status_code=response.status_code)
    raise ProviderError(
        f"{session.label} API request failed: {response.status_code} {message}",
        status_code=response.status_code,
    )


async def _get(session: ProviderSession, path: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
    logger.debug("GET %s %s", path, params or "")
    try:
        return await session.http.get(path, params=params)
    except httpx.HTTPError as error:
        raise ProviderError(f"{session.label} API request failed: {error}") from error


async def _paginate(session: ProviderSession, path: str, params: Dict[str, str], max_pages: int) -> List[Payload]:
    """Collect pages until a short page, a failure or the page ceiling.

    A failed page ends the loop and keeps what was collected so far.
    """
    items: List[Payload] = []
    for page in range(1, max_pages + 1):
        query = dict(params, per_page=str(PAGE_SIZE), page=str(page))
        try:
            response = await _get(session, path, params=query)
        except ProviderError as error:
            logger.warning("Stopping %s at page %d: %s", path, page, error)
            break
        if not response.is_success:
            logger.warning("Stopping %s at page %d: HTTP %d", path, page, response.status_code)
            break
        try:
            batch = _decode(session, response)
        except ProviderError as error:
            logger.warning("Stopping %s at page %d: %s", path, page, error)
            break
        if not isinstance(batch, list) or not batch:
            break
        items.extend(batch)
        if len(batch) < PAGE_SIZE:
            break
    else:
        logger.info("%s reached the %d page ceiling; results may be truncated", path, max_pages)
    return items


class ProviderClient(ABC):
    """Retrieval interface shared by the GitHub and GitLab adapters."""

    name = ""

    def __init__(self, session: ProviderSession, config: ProviderConfig) -> None:
        self.session = session
        self.config = config

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.session.close()

    @abstractmethod
    async def fetch_profile(self, username: str) -> Payload:
        raise NotImplementedError

    @abstractmethod
    def owner_ref(self, profile: Payload) -> str:
        raise NotImplementedError

    @abstractmethod
    async def fetch_repositories(self, owner_ref: str) -> List[Payload]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_events(self, username: str, year_start: date, year_end: date) -> List[Payload]:
        raise NotImplementedError

    @abstractmethod
    def wrap(self, profile: Payload, repositories: List[Payload], events: List[Payload]) -> RawStory:
        raise NotImplementedError


class GitHubClient(ProviderClient):
    name = "github"

    async def fetch_profile(self, username: str) -> Payload:
        response = await _get(self.session, f"/users/{quote(username, safe='')}")
        if response.status_code == 404:
            raise UserNotFoundError(username, self.session.label)
        _raise_for_status(self.session, response)
        return _decode(self.session, response)

    def owner_ref(self, profile: Payload) -> str:
        return str(profile["login"])

    async def fetch_repositories(self, owner_ref: str) -> List[Payload]:
        params = {"type": "owner", "sort": "updated", "direction": "desc"}
        return await _paginate(
            self.session, f"/users/{quote(owner_ref, safe='')}/repos", params, self.config.max_repo_pages
        )

    async def fetch_events(self, username: str, year_start: date, year_end: date) -> List[Payload]:
        # The events API has no date filter; the normalizer scopes by year.
        return await _paginate(
            self.session, f"/users/{quote(username, safe='')}/events", {}, self.config.max_event_pages
        )

    def wrap(self, profile: Payload, repositories: List[Payload], events: List[Payload]) -> RawStory:
        return GitHubRaw(profile=profile, repositories=repositories, events=events)


class GitLabClient(ProviderClient):
    name = "gitlab"

    async def fetch_profile(self, username: str) -> Payload:
        response = await _get(self.session, "/users", params={"username": username})
        if response.status_code == 404:
            raise UserNotFoundError(username, self.session.label)
        _raise_for_status(self.session, response)
        users = _decode(self.session, response)
        if not users:
            raise UserNotFoundError(username, self.session.label)

        summary = users[0]
        detail = await _get(self.session, f"/users/{summary['id']}")
        if not detail.is_success:
            logger.info("GitLab user detail unavailable for %s (HTTP %d)", username, detail.status_code)
            return summary
        return _decode(self.session, detail)

    def owner_ref(self, profile: Payload) -> str:
        return str(profile["id"])

    async def fetch_repositories(self, owner_ref: str) -> List[Payload]:
        # statistics carries repository_size; GitLab omits it without project access.
        params = {"order_by": "updated_at", "sort": "desc", "statistics": "true"}
        return await _paginate(self.session, f"/users/{owner_ref}/projects", params, self.config.max_repo_pages)

    async def fetch_events(self, username: str, year_start: date, year_end: date) -> List[Payload]:
        # after/before are exclusive bounds.
        params = {
            "after": (year_start - timedelta(days=1)).isoformat(),
            "before": (year_end + timedelta(days=1)).isoformat(),
        }
        return await _paginate(
            self.session, f"/users/{quote(username, safe='')}/events", params, self.config.max_event_pages
        )

    def wrap(self, profile: Payload, repositories: List[Payload], events: List[Payload]) -> RawStory:
        return GitLabRaw(profile=profile, repositories=repositories, events=events)


_CLIENTS = {"github": GitHubClient, "gitlab": GitLabClient}


def create_client(
    provider: str,
    config: ProviderConfig,
    token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProviderClient:
    client_cls = _CLIENTS[provider]
    session = ProviderSession.create(provider, config, token=token, transport=transport)
    return client_cls(session, config)
