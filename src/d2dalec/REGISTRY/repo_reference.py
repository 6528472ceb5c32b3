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
Repository reference parsing and handling.
Parses GitHub repository references like 'owner/repo' or 'https://github.com/owner/repo'.
"""

from dataclasses import dataclass


@dataclass
class RepoReference:
    """
    Parsed GitHub repository reference.

    Examples:
        - owner/repo -> github.com/owner/repo
        - github.com/owner/repo -> github.com/owner/repo
        - https://github.com/owner/repo.git -> github.com/owner/repo
    """

    owner: str
    repo: str

    DEFAULT_HOST = "github.com"

    @classmethod
    def parse(cls, reference: str) -> "RepoReference":
        """
        Parse a repository reference string.

        Args:
            reference: Repository reference (e.g., 'owner/repo', 'https://github.com/owner/repo')

        Returns:
            Parsed RepoReference object.
        """
        if not reference or not reference.strip():
            raise ValueError("Empty repository reference")

        path = reference.strip().rstrip("/")

        # Remove protocol and host if present
        for prefix in ("https://", "http://"):
            if path.startswith(prefix):
                path = path[len(prefix):]
        if path.startswith(cls.DEFAULT_HOST + "/"):
            path = path[len(cls.DEFAULT_HOST) + 1:]

        parts = [p for p in path.split("/") if p]
        if len(parts) < 2:
            raise ValueError(
                f"invalid repository path: {reference} (expected format: owner/repo)"
            )

        repo = parts[1]
        if repo.endswith(".git"):
            repo = repo[:-4]

        return cls(owner=parts[0], repo=repo)

    @property
    def full_name(self) -> str:
        """Get owner/repo."""
        return f"{self.owner}/{self.repo}"

    @property
    def web_url(self) -> str:
        """Get the repository page URL."""
        return f"https://{self.DEFAULT_HOST}/{self.full_name}"

    def __str__(self) -> str:
        return self.full_name
