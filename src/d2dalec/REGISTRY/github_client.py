# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
GitHub client for fetching repository metadata.
Uses the GitHub REST API v3.
"""

import json
import logging
from http.client import HTTPException
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.request import urlopen, Request
from urllib.error import HTTPError, URLError

from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..MODELS.dalec_spec import RepoMetadata
from .repo_reference import RepoReference

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "d2dalec-cli"


@dataclass
class RepoInfo:
    """Metadata about a GitHub repository."""

    owner: str
    repo: str
    description: str = ""
    website: str = ""
    git_url: str = ""
    license: str = ""
    latest_commit: str = ""
    default_branch: str = "main"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def to_metadata(self) -> RepoMetadata:
        """Convert to the record consumed by the Dalec converter."""
        return RepoMetadata(
            git_url=self.git_url,
            commit=self.latest_commit,
            website=self.website,
            description=self.description,
            license=self.license,
            repo_name=self.repo,
        )


def _is_transient(error: BaseException) -> bool:
    """Network failures and server errors are worth retrying."""
    if isinstance(error, HTTPError):
        return error.code >= 500
    return isinstance(error, (OSError, HTTPException))


class GitHubClient:
    """
    Client for the GitHub REST API.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff: float = 0.5,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: Optional access token, raises the API rate limit
            api_url: Base URL of the API
            timeout: Per-request timeout in seconds
            max_attempts: Attempts per request for transient failures
            backoff: Multiplier for the exponential wait between attempts
        """
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._retrying = Retrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=backoff, max=8),
            reraise=True,
        )

    def _make_request(self, url: str) -> Dict[str, Any]:
        """Make a single API request and decode the JSON body."""
        request = Request(url)
        request.add_header("Accept", "application/vnd.github.v3+json")
        request.add_header("User-Agent", USER_AGENT)
        if self.token:
            request.add_header("Authorization", f"Bearer {self.token}")

        logger.debug("GET %s", url)
        with urlopen(request, timeout=self.timeout) as response:
            return json.loads(response.read().decode())

    def _get_json(self, url: str) -> Dict[str, Any]:
        """GET a URL, retrying transient failures."""
        try:
            data = self._retrying(self._make_request, url)
        except HTTPError as e:
            body = e.read().decode(errors="replace") if e.fp else ""
            raise RuntimeError(f"GitHub API error: {e.code} {e.reason} - {body}") from e
        except URLError as e:
            raise RuntimeError(f"GitHub API unreachable: {e.reason}") from e
        except (OSError, HTTPException) as e:
            raise RuntimeError(f"GitHub API request failed: {e!r}") from e
        except json.JSONDecodeError as e:
            raise RuntimeError(f"failed to parse JSON from {url}: {e}") from e

        if not isinstance(data, dict):
            raise RuntimeError(f"unexpected response from {url}")
        return data

    def fetch_repo_info(self, reference: str) -> RepoInfo:
        """
        Fetch repository metadata and its latest commit.

        Args:
            reference: Repository reference (owner/repo or a GitHub URL)

        Returns:
            RepoInfo with the resolved metadata.
        """
        ref = RepoReference.parse(reference)
        info = RepoInfo(
            owner=ref.owner,
            repo=ref.repo,
            website=ref.web_url,
            git_url=ref.web_url,
        )

        self._fetch_repo_metadata(info)
        self._fetch_latest_commit(info)
        return info

    def _fetch_repo_metadata(self, info: RepoInfo) -> None:
        """Fill description, homepage, default branch and license."""
        data = self._get_json(f"{self.api_url}/repos/{info.owner}/{info.repo}")

        if isinstance(data.get("description"), str):
            info.description = data["description"]

        homepage = data.get("homepage")
        if isinstance(homepage, str) and homepage:
            info.website = homepage

        branch = data.get("default_branch")
        info.default_branch = branch if isinstance(branch, str) and branch else "main"

        license_info = data.get("license")
        if isinstance(license_info, dict):
            spdx_id = license_info.get("spdx_id")
            if isinstance(spdx_id, str) and spdx_id != "NOASSERTION":
                info.license = spdx_id

    def _fetch_latest_commit(self, info: RepoInfo) -> None:
        """Resolve the head commit of the default branch."""
        data = self._get_json(
            f"{self.api_url}/repos/{info.owner}/{info.repo}/commits/{info.default_branch}"
        )
        sha = data.get("sha")
        if not isinstance(sha, str) or not sha:
            raise RuntimeError("commit SHA not found in response")
        info.latest_commit = sha
