# src/issue_engagement/data/client.py

"""Minimal GitHub GraphQL client."""

from typing import Any, Dict, Optional

import requests

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"


class GitHubGraphQLClient:
    """Executes GraphQL queries against the GitHub API."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_GRAPHQL_URL,
        timeout: float = 30,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.headers = {
            "Authorization": f"bearer {token}",
            "Accept": "application/vnd.github.v4.idl",
        }

    def execute(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Execute a GraphQL query and return its `data` payload."""
        response = requests.post(
            self.api_url,
            json={"query": query, "variables": variables or {}},
            headers=self.headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        response_json = response.json()

        if "errors" in response_json:
            error_messages = [error["message"] for error in response_json["errors"]]
            raise ValueError(
                f"GraphQL API returned errors: {', '.join(error_messages)}"
            )
        if "data" not in response_json:
            raise ValueError(
                "Unexpected response from GraphQL API: 'data' key is missing."
            )
        return response_json["data"]
