"""GitHub 콘텐츠 API 클라이언트(GitHub contents API client)."""
from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

import httpx

from .config import get_settings
from .errors import RemoteAccessError
from .logger import get_logger

logger = get_logger(__name__)

USER_AGENT = "RisklensSecurityAssistant/1.0"
API_VERSION = "2022-11-28"


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in response.text.lower()


class GitHubClient:
    """GitHub 저장소 파일 조회 클라이언트(Fetch files from a GitHub repository).

    Failures are mapped to RemoteAccessError and never retried here.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self._token = (token if token is not None else settings.github_token).strip()
        self._base_url = (base_url or settings.github_api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.github_timeout_seconds
        self._transport = transport

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def _headers(self, raw_content: bool = False) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.raw+json" if raw_content else "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self._base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def _contents_url(self, owner: str, repo: str, file_path: str) -> str:
        path_part = "/".join(quote(segment, safe="") for segment in file_path.split("/"))
        return f"{self._repo_url(owner, repo)}/contents/{path_part}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    async def check_repo_access(self, owner: str, repo: str) -> None:
        """저장소 접근 가능 여부 확인(Ensure the repository exists and is readable)."""

        slug = f"{owner}/{repo}"
        try:
            async with self._client() as client:
                response = await client.get(self._repo_url(owner, repo), headers=self._headers())
        except httpx.HTTPError as exc:
            logger.info("GitHub 접근 실패(Failed to reach GitHub for %s): %s", slug, exc)
            raise RemoteAccessError(
                "unavailable",
                slug,
                f"Failed to reach GitHub ({slug}). Check network or try again. {exc}",
            ) from exc

        if response.status_code == 404:
            if self.has_token:
                message = (
                    f"Repo {slug} not found. Check spelling and that you have access "
                    "(token scope must include repo)."
                )
            else:
                message = f"Repo {slug} not found or it is private. For private repos, set GITHUB_TOKEN in your .env."
            raise RemoteAccessError("not_found", slug, message)
        self._raise_for_forbidden(response, slug)
        if response.is_error:
            raise RemoteAccessError(
                "http_error",
                slug,
                f"GitHub API {response.status_code} for {slug}: {response.text or response.reason_phrase}",
            )

    async def fetch_file(self, owner: str, repo: str, file_path: str, ref: Optional[str] = None) -> Optional[str]:
        """저장소 파일 내용 조회, 없으면 None(Fetch raw file content, None on 404)."""

        slug = f"{owner}/{repo}"
        params = {"ref": ref} if ref else None
        try:
            async with self._client() as client:
                response = await client.get(
                    self._contents_url(owner, repo, file_path),
                    headers=self._headers(raw_content=True),
                    params=params,
                )
        except httpx.HTTPError as exc:
            raise RemoteAccessError(
                "unavailable",
                slug,
                f"Failed to fetch {file_path} from GitHub ({slug}). Check network. {exc}",
            ) from exc

        if response.status_code == 404:
            logger.debug("GitHub file not found: %s/%s", slug, file_path)
            return None
        self._raise_for_forbidden(response, slug)
        if response.is_error:
            raise RemoteAccessError(
                "http_error",
                slug,
                f"GitHub API {response.status_code} fetching {file_path} from {slug}: "
                f"{response.text or response.reason_phrase}",
            )
        return response.text

    @staticmethod
    def _raise_for_forbidden(response: httpx.Response, slug: str) -> None:
        if response.status_code not in (403, 429):
            return
        if response.status_code == 429 or _is_rate_limited(response):
            raise RemoteAccessError(
                "rate_limited",
                slug,
                "GitHub API rate limit exceeded. Set GITHUB_TOKEN in .env for higher limits, or try again later.",
            )
        raise RemoteAccessError(
            "access_denied",
            slug,
            f"GitHub API 403 for {slug}: {response.text or response.reason_phrase}. "
            "Check that your GITHUB_TOKEN has access to this repository.",
        )
