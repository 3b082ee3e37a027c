"""GitHub REST API client for listing the repositories to preview."""

import logging
from typing import List, Optional, Dict, Any, Tuple
import requests

from .config import Config

logger = logging.getLogger(__name__)


def has_next_page(link_header: Optional[str]) -> bool:
    """Check a ``Link`` response header for a ``rel="next"`` relation."""
    return bool(link_header) and 'rel="next"' in link_header


class RepositoryLister:
    """Lists repository names owned by the configured account."""

    def __init__(
        self,
        config: Config,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """Initialize the lister.

        Args:
            config: Application configuration (owner, exclusion, API settings)
            token: GitHub access token. Usually ``config.token``.
            session: Optional requests session, mainly for tests
        """
        self.config = config
        self.token = token
        self.session = session or requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }

    def _keep(self, record: Dict[str, Any]) -> bool:
        if not isinstance(record, dict) or not isinstance(record.get("owner"), dict):
            return False
        owner = record["owner"].get("login")
        name = record.get("name")
        if not name or owner is None:
            return False
        return owner == self.config.owner and name != self.config.exclude_repo

    def _fetch_page(self, page: int) -> Tuple[List[Dict[str, Any]], bool]:
        """Fetch one page of ``/user/repos``.

        Returns:
            Tuple of (records on the page, whether another page follows)

        Raises:
            requests.RequestException: On transport errors or non-2xx status
            ValueError: If the body is not a JSON list
        """
        response = self.session.get(
            f"{self.config.api_url}/user/repos",
            params={"per_page": self.config.per_page, "page": page},
            headers=self.headers,
            timeout=self.config.api_timeout
        )
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Unexpected response body: {type(data).__name__}")

        return data, has_next_page(response.headers.get("link"))

    def list_repository_names(self) -> List[str]:
        """Collect the names of all repositories to preview.

        Pagination stops at the first page without a ``next`` link, or at the
        first error, in which case the names gathered so far are returned.
        """
        if not self.token:
            logger.critical(
                f"FATAL: {self.config.token_env} environment variable not set. "
                "Cannot fetch dynamic repository list."
            )
            return []

        logger.info("Fetching all accessible repositories for the token user...")

        names: List[str] = []
        page = 1
        more = True
        while more:
            try:
                records, more = self._fetch_page(page)
            except (requests.RequestException, ValueError) as e:
                logger.error(f"Error fetching repository list (page {page}): {e}")
                break

            names.extend(record["name"] for record in records if self._keep(record))
            page += 1

        logger.info(f"Found {len(names)} deployable repositories in {self.config.owner}.")
        return names
