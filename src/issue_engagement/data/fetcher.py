# src/issue_engagement/data/fetcher.py

"""GraphQL data fetcher for issue activity and project boards."""

import logging
from typing import Any, Dict, List, Optional

from ..engine.models import GHOST_LOGIN, ActivityRecord, ProjectDetails, ProjectItem
from .client import GitHubGraphQLClient

logger = logging.getLogger(__name__)

ISSUE_DETAILS_QUERY = """
query(
  $owner: String!
  $repo: String!
  $number: Int!
  $commentsCursor: String
  $reactionsCursor: String
) {
  repository(owner: $owner, name: $repo) {
    issue(number: $number) {
      id
      number
      title
      body
      state
      createdAt
      updatedAt
      closedAt
      author { login, __typename }
      assignees(first: 100) {
        nodes { login, __typename }
      }
      reactions(first: 100, after: $reactionsCursor) {
        pageInfo { hasNextPage, endCursor }
        nodes {
          content
          createdAt
          user { login, __typename }
        }
      }
      comments(first: 100, after: $commentsCursor) {
        pageInfo { hasNextPage, endCursor }
        nodes {
          createdAt
          author { login, __typename }
          reactions(first: 100) {
            nodes {
              content
              createdAt
              user { login, __typename }
            }
          }
        }
      }
    }
  }
}
"""

PROJECT_ITEMS_QUERY = """
query($owner: String!, $repo: String!, $projectNumber: Int!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    projectV2(number: $projectNumber) {
      id
      items(first: 100, after: $cursor) {
        pageInfo { hasNextPage, endCursor }
        nodes {
          id
          content {
            ... on Issue {
              number
              repository {
                name
                owner { login }
              }
            }
          }
        }
      }
    }
  }
}
"""


class GitHubDataFetcher:
    """Fetches issue activity and project items from the GitHub GraphQL API."""

    def __init__(self, client: GitHubGraphQLClient):
        self.client = client

    def _get_author_info(self, author_obj) -> Dict[str, Any]:
        """Helper to safely extract author information."""
        if not author_obj:
            return {"login": GHOST_LOGIN, "type": "User"}

        return {
            "login": author_obj.get("login", GHOST_LOGIN),
            "type": author_obj.get("__typename", "User"),
        }

    def _normalize_reactions(self, nodes) -> List[Dict[str, Any]]:
        return [
            {
                "user": self._get_author_info(node.get("user")),
                "content": node.get("content", ""),
                "createdAt": node.get("createdAt"),
            }
            for node in nodes or []
            if node
        ]

    def _collect_nodes(
        self,
        variables: Dict[str, Any],
        raw_issue: Dict[str, Any],
        field: str,
        cursor_variable: str,
    ) -> List[Dict[str, Any]]:
        """Collects every page of an issue connection, starting from `raw_issue`."""
        connection = raw_issue.get(field) or {}
        nodes = list(connection.get("nodes") or [])
        page_info = connection.get("pageInfo") or {}

        while page_info.get("hasNextPage"):
            data = self.client.execute(
                ISSUE_DETAILS_QUERY,
                {**variables, cursor_variable: page_info.get("endCursor")},
            )
            issue = (data.get("repository") or {}).get("issue") or {}
            connection = issue.get(field) or {}
            nodes.extend(connection.get("nodes") or [])
            page_info = connection.get("pageInfo") or {}

        return nodes

    def fetch_issue(self, owner: str, repo: str, number: int) -> ActivityRecord:
        """Fetch one issue with all of its comments, reactions and participants."""
        variables = {
            "owner": owner,
            "repo": repo,
            "number": number,
            "commentsCursor": None,
            "reactionsCursor": None,
        }
        data = self.client.execute(ISSUE_DETAILS_QUERY, variables)

        raw_issue = (data.get("repository") or {}).get("issue")
        if not raw_issue:
            raise ValueError(f"Issue {owner}/{repo}#{number} not found")

        comments = [
            {
                "author": self._get_author_info(node.get("author")),
                "createdAt": node.get("createdAt"),
                "reactions": self._normalize_reactions(
                    (node.get("reactions") or {}).get("nodes")
                ),
            }
            for node in self._collect_nodes(
                variables, raw_issue, "comments", "commentsCursor"
            )
            if node
        ]
        reactions = self._normalize_reactions(
            self._collect_nodes(variables, raw_issue, "reactions", "reactionsCursor")
        )

        assignees = [
            self._get_author_info(node)
            for node in (raw_issue.get("assignees") or {}).get("nodes") or []
            if node
        ]

        # Missing required fields surface as a pydantic ValidationError
        return ActivityRecord.model_validate(
            {
                "id": raw_issue.get("id"),
                "owner": owner,
                "repo": repo,
                "number": raw_issue.get("number"),
                "title": raw_issue.get("title"),
                "body": raw_issue.get("body"),
                "state": raw_issue.get("state", "OPEN"),
                "createdAt": raw_issue.get("createdAt"),
                "updatedAt": raw_issue.get("updatedAt"),
                "closedAt": raw_issue.get("closedAt"),
                "author": self._get_author_info(raw_issue.get("author")),
                "assignees": assignees,
                "comments": comments,
                "reactions": reactions,
            }
        )

    def fetch_project(
        self, owner: str, repo: str, project_number: int
    ) -> Optional[ProjectDetails]:
        """Fetch every issue on a repository project board."""
        items: List[ProjectItem] = []
        project_id = None
        cursor = None
        has_more = True

        while has_more:
            variables = {
                "owner": owner,
                "repo": repo,
                "projectNumber": project_number,
                "cursor": cursor,
            }
            data = self.client.execute(PROJECT_ITEMS_QUERY, variables)
            project_data = (data.get("repository") or {}).get("projectV2")
            if not project_data:
                logger.warning("Project #%s not found in %s/%s", project_number, owner, repo)
                return None

            project_id = project_data.get("id")
            connection = project_data.get("items") or {}
            for node in connection.get("nodes") or []:
                content = (node or {}).get("content") or {}
                # Draft issues and pull requests have no issue number here
                if not content.get("number"):
                    continue
                repository = content.get("repository") or {}
                items.append(
                    ProjectItem(
                        id=node.get("id"),
                        owner=(repository.get("owner") or {}).get("login", owner),
                        repo=repository.get("name", repo),
                        number=content["number"],
                    )
                )

            page_info = connection.get("pageInfo") or {}
            has_more = bool(page_info.get("hasNextPage"))
            cursor = page_info.get("endCursor")

        return ProjectDetails(
            id=project_id, owner=owner, number=project_number, items=items
        )
