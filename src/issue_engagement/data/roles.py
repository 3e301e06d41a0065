# src/issue_engagement/data/roles.py

"""Contributor role detection backed by the GitHub GraphQL API."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from ..engine.models import RepoRef
from ..engine.scorer import RoleResolver
from ..engine.weights import ContributorRole, UserGroups
from ..utils.helpers import now_utc
from .client import GitHubGraphQLClient

logger = logging.getLogger(__name__)

FREQUENT_CONTRIBUTIONS = 3
FREQUENT_WINDOW = timedelta(days=90)
MAINTAINER_PERMISSIONS = ("ADMIN", "MAINTAIN", "WRITE")

COLLABORATOR_PERMISSION_QUERY = """
query($owner: String!, $name: String!, $login: String!) {
  repository(owner: $owner, name: $name) {
    collaborators(query: $login, first: 10) {
      edges {
        permission
        node { login }
      }
    }
  }
}
"""

ORGANIZATION_MEMBERSHIP_QUERY = """
query($organization: String!, $login: String!) {
  organization(login: $organization) {
    membersWithRole(first: 1, query: $login) {
      nodes { login }
    }
  }
}
"""

CONTRIBUTION_HISTORY_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      issueContributions { totalCount }
      pullRequestContributions { totalCount }
      totalCommitContributions
    }
  }
}
"""

SEARCH_COUNT_QUERY = """
query($query: String!) {
  search(query: $query, type: ISSUE, first: 1) {
    issueCount
  }
}
"""


class GitHubRoleResolver:
    """Classifies a login against a repository.

    Checks run in priority order: maintainer, partner, frequent and then
    first-time contributor. A remote check that fails counts as a "no".
    """

    def __init__(
        self,
        client: GitHubGraphQLClient,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.client = client
        self.clock = clock

    def resolve_role(
        self, login: str, repo: RepoRef, groups: UserGroups
    ) -> ContributorRole:
        if login in groups.internal or self.is_maintainer(login, repo):
            role = ContributorRole.MAINTAINER
        elif login in groups.partner:
            role = ContributorRole.PARTNER
        elif self.is_frequent_contributor(login):
            role = ContributorRole.FREQUENT
        elif self.is_first_time_contributor(login, repo):
            role = ContributorRole.FIRST_TIME
        else:
            role = ContributorRole.BASE

        logger.debug("Detected role for user %s: %s", login, role.value)
        return role

    def is_maintainer(self, login: str, repo: RepoRef) -> bool:
        """Write access to the repository or membership of its owning org."""
        try:
            data = self.client.execute(
                COLLABORATOR_PERMISSION_QUERY,
                {"owner": repo.owner, "name": repo.name, "login": login},
            )
            edges = (
                ((data.get("repository") or {}).get("collaborators") or {}).get("edges")
                or []
            )
            for edge in edges:
                if (edge.get("node") or {}).get("login") == login:
                    return edge.get("permission") in MAINTAINER_PERMISSIONS
        except Exception as e:
            logger.debug("Failed to check collaborator permission for %s: %s", login, e)

        try:
            data = self.client.execute(
                ORGANIZATION_MEMBERSHIP_QUERY,
                {"organization": repo.owner, "login": login},
            )
            members = (
                ((data.get("organization") or {}).get("membersWithRole") or {}).get(
                    "nodes"
                )
                or []
            )
            return any((member or {}).get("login") == login for member in members)
        except Exception as e:
            logger.debug("Failed to check organization membership for %s: %s", login, e)
            return False

    def is_frequent_contributor(self, login: str) -> bool:
        """At least three contributions anywhere in the last 90 days."""
        now = self.clock()
        try:
            data = self.client.execute(
                CONTRIBUTION_HISTORY_QUERY,
                {
                    "login": login,
                    "from": (now - FREQUENT_WINDOW).isoformat(),
                    "to": now.isoformat(),
                },
            )
        except Exception as e:
            logger.debug("Failed to check contribution history for %s: %s", login, e)
            return False

        contributions = (
            (data.get("user") or {}).get("contributionsCollection") or {}
        )
        total = (
            (contributions.get("issueContributions") or {}).get("totalCount", 0)
            + (contributions.get("pullRequestContributions") or {}).get("totalCount", 0)
            + (contributions.get("totalCommitContributions") or 0)
        )
        return total >= FREQUENT_CONTRIBUTIONS

    def is_first_time_contributor(self, login: str, repo: RepoRef) -> bool:
        """No issues or pull requests authored in the repository."""
        search = f"author:{login} repo:{repo.owner}/{repo.name}"
        try:
            issues = self.client.execute(SEARCH_COUNT_QUERY, {"query": f"is:issue {search}"})
            pulls = self.client.execute(SEARCH_COUNT_QUERY, {"query": f"is:pr {search}"})
        except Exception as e:
            logger.debug("Failed to check first-time status for %s: %s", login, e)
            return False

        issue_count = (issues.get("search") or {}).get("issueCount", 0)
        pull_count = (pulls.get("search") or {}).get("issueCount", 0)
        return issue_count == 0 and pull_count == 0


class CachedRoleResolver:
    """Memoizes successful role lookups for the lifetime of a scoring run.

    Safe to share between worker threads. Failed lookups are not cached, so
    a later item may retry them.
    """

    def __init__(self, resolver: RoleResolver):
        self.resolver = resolver
        self._cache: Dict[Tuple[str, str, str], ContributorRole] = {}
        self._lock = threading.Lock()

    def resolve_role(
        self, login: str, repo: RepoRef, groups: UserGroups
    ) -> ContributorRole:
        key = (login, repo.owner, repo.name)
        with self._lock:
            cached: Optional[ContributorRole] = self._cache.get(key)
        if cached is not None:
            return cached

        role = self.resolver.resolve_role(login, repo, groups)
        with self._lock:
            self._cache[key] = role
        return role

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
