"""GitHub API client using PyGitHub."""

import logging
import os
import time

from github import Auth, Github
from github.GithubException import (
    BadCredentialsException,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)
from github.Issue import Issue
from github.PaginatedList import PaginatedList
from github.Repository import Repository

from ..errors import TrackerFetchError

logger = logging.getLogger(__name__)

PER_PAGE = 100


class GitHubClient:
    """Fetches open issue numbers with optional authentication."""

    def __init__(
        self,
        token: str | None = None,
        max_retries: int = 2,
        retry_delay: float = 60.0,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var. Unauthenticated access is allowed
                but limited to 60 requests/hour.
            max_retries: Retries per page after a rate limit response
            retry_delay: Seconds to wait before retrying a page
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        if self.token:
            self.github = Github(auth=Auth.Token(self.token), per_page=PER_PAGE)
        else:
            logger.warning(
                "Using unauthenticated GitHub API (60 requests/hour limit). "
                "Set GITHUB_TOKEN for higher limits (5,000 requests/hour)."
            )
            self.github = Github(per_page=PER_PAGE)

    def _log_rate_limit(self) -> None:
        """Log the remaining request budget."""
        try:
            remaining, limit = self.github.rate_limiting
        except GithubException as e:
            logger.debug("Could not read rate limit: %s", e)
            return
        logger.debug(
            "GitHub API rate limit: %d/%d requests remaining", remaining, limit
        )

    def get_repository(self, org: str, repo: str) -> Repository:
        """Get repository object."""
        try:
            return self.github.get_repo(f"{org}/{repo}")
        except UnknownObjectException as e:
            raise TrackerFetchError(f"Repository {org}/{repo} not found") from e
        except BadCredentialsException as e:
            raise TrackerFetchError("GitHub rejected the access token") from e
        except GithubException as e:
            raise TrackerFetchError(
                f"Failed to look up repository {org}/{repo}: {e}"
            ) from e

    def fetch_open_issue_numbers(self, org: str, repo: str) -> set[int]:
        """Fetch the numbers of all open issues in a repository.

        Pull requests are excluded. Pages are requested until an empty page
        is returned.

        Args:
            org: Organization or user owning the repository
            repo: Repository name

        Returns:
            Set of open issue numbers

        Raises:
            TrackerFetchError: If the repository lookup or any page fails
        """
        self._log_rate_limit()
        repository = self.get_repository(org, repo)
        paginated = repository.get_issues(state="open")

        issue_numbers: set[int] = set()
        page = 0
        while True:
            items = self._fetch_page(paginated, page)
            if not items:
                break

            for issue in items:
                if issue.pull_request is None:
                    issue_numbers.add(issue.number)

            page += 1
            logger.debug(
                "Fetched page %d (%d items, %d open issues so far)",
                page,
                len(items),
                len(issue_numbers),
            )

        logger.info(
            "Fetched %d open issues from %s/%s in %d pages",
            len(issue_numbers),
            org,
            repo,
            page,
        )
        return issue_numbers

    def _fetch_page(self, paginated: PaginatedList[Issue], page: int) -> list[Issue]:
        """Fetch one page, retrying after rate limit responses."""
        attempt = 0
        while True:
            try:
                return list(paginated.get_page(page))
            except RateLimitExceededException as e:
                if attempt >= self.max_retries:
                    raise TrackerFetchError(
                        f"Rate limit exceeded fetching open issues (page {page + 1})"
                    ) from e
                attempt += 1
                logger.warning(
                    "Rate limit exceeded on page %d, waiting %.0f seconds...",
                    page + 1,
                    self.retry_delay,
                )
                time.sleep(self.retry_delay)
            except BadCredentialsException as e:
                raise TrackerFetchError("GitHub rejected the access token") from e
            except GithubException as e:
                raise TrackerFetchError(
                    f"Failed to fetch open issues (page {page + 1}): {e}"
                ) from e
