#!/usr/bin/env python3
"""GitHub REST API client for commits, tags and releases.

Lists are paginated and capped at a caller-supplied item limit. There is no
retry: any failed request raises and aborts the calling operation.
"""

import logging
from typing import Dict, List, Any, Optional

import requests

from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)


class GithubAuthError(Exception):
    """Raised when GitHub API authentication fails."""
    pass


class GithubApiError(Exception):
    """Raised when GitHub API operations fail."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


class GithubClient:
    """Read-only client for the repository listings the changelog needs."""

    def __init__(self, token: Optional[str] = None, timeout_s: Optional[int] = None,
                 per_page: Optional[int] = None, session: Optional[requests.Session] = None):
        """Initialize GitHub client.

        Args:
            token: GitHub Personal Access Token (defaults to Config.GITHUB_TOKEN)
            timeout_s: Request timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            per_page: Page size for list endpoints (defaults to Config.GITHUB_PER_PAGE)
            session: Optional pre-built requests session

        Raises:
            GithubAuthError: If no valid token is provided
        """
        github_config = Config.get_github_config()
        self.token = token or github_config["token"]
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.per_page = per_page or github_config["per_page"]
        self.base_url = github_config["api_url"]

        if not self.token:
            raise GithubAuthError("GitHub token is required (GITHUB_TOKEN or GITHUB_PAT env var)")

        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'conventional-changelog-builder/1.0'
        })

        logger.info("GitHub client initialized")

    def list_commits(self, owner: str, repo: str, limit: int = 500) -> List[Dict[str, Any]]:
        """List commits on the default branch, newest first."""
        return self._list(f"/repos/{owner}/{repo}/commits", limit, what=f"commits for {owner}/{repo}")

    def list_tags(self, owner: str, repo: str, limit: int = 500) -> List[Dict[str, Any]]:
        """List repository tags."""
        return self._list(f"/repos/{owner}/{repo}/tags", limit, what=f"tags for {owner}/{repo}")

    def list_releases(self, owner: str, repo: str, limit: int = 500) -> List[Dict[str, Any]]:
        """List published and draft releases."""
        return self._list(f"/repos/{owner}/{repo}/releases", limit, what=f"releases for {owner}/{repo}")

    def _list(self, path: str, limit: int, *, what: str) -> List[Dict[str, Any]]:
        """Collect items page by page.

        Stops once ``limit`` items are collected or a page comes back shorter
        than ``per_page``.

        Raises:
            GithubAuthError: On HTTP 401
            GithubApiError: On any other failure
        """
        url = f"{self.base_url}{path}"
        items: List[Dict[str, Any]] = []
        page = 1

        logger.info(f"Fetching {what}")
        while True:
            params = {'page': page, 'per_page': self.per_page}
            try:
                response = self.session.get(url, params=params, timeout=self.timeout_s)
            except requests.Timeout as e:
                raise GithubApiError(f"Timeout while fetching {what}: {e}", code="TIMEOUT")
            except requests.RequestException as e:
                raise GithubApiError(f"Failed to fetch {what}: {e}", code="NETWORK")

            if response.status_code == 401:
                raise GithubAuthError("Invalid GitHub token or insufficient permissions")
            elif response.status_code == 404:
                raise GithubApiError(f"Not found while fetching {what}", code="NOT_FOUND")
            elif response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
                raise GithubApiError("GitHub API rate limit exceeded", code="RATE_LIMIT")
            elif response.status_code != 200:
                raise GithubApiError(f"GitHub API error: HTTP {response.status_code}")

            page_items = response.json()
            for item in page_items:
                items.append(item)
                if len(items) >= limit:
                    logger.debug(f"✓ Reached limit of {limit} {what}")
                    return items

            if len(page_items) < self.per_page:
                break
            page += 1

        logger.debug(f"✓ Retrieved {len(items)} {what}")
        return items

    def close(self) -> None:
        """Close the GitHub client session."""
        if self.session:
            self.session.close()
            logger.debug("GitHub client session closed")
