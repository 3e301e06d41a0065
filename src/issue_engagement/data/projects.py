# src/issue_engagement/data/projects.py

"""Writes engagement scores back to a project board field."""

import logging
from typing import Any, Dict, Optional

import requests

from ..engine.models import EngagementResponse
from .client import GitHubGraphQLClient

logger = logging.getLogger(__name__)

PROJECT_FIELDS_QUERY = """
query($owner: String!, $repo: String!, $projectNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    projectV2(number: $projectNumber) {
      id
      fields(first: 100) {
        nodes {
          ... on ProjectV2Field {
            id
            name
            dataType
          }
        }
      }
    }
  }
}
"""

UPDATE_ITEM_FIELD_MUTATION = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $value: ProjectV2FieldValue!) {
  updateProjectV2ItemFieldValue(
    input: {projectId: $projectId, itemId: $itemId, fieldId: $fieldId, value: $value}
  ) {
    projectV2Item { id }
  }
}
"""


class ProjectScoreWriter:
    """Stores each item's score in a named project field."""

    def __init__(self, client: GitHubGraphQLClient):
        self.client = client

    def get_field(
        self, owner: str, repo: str, project_number: int, field_name: str
    ) -> Optional[Dict[str, Any]]:
        """Returns the project id and the field's id and data type."""
        data = self.client.execute(
            PROJECT_FIELDS_QUERY,
            {"owner": owner, "repo": repo, "projectNumber": project_number},
        )
        project = (data.get("repository") or {}).get("projectV2")
        if not project:
            return None

        for field in project["fields"]["nodes"]:
            if field and field.get("name") == field_name:
                return {
                    "project_id": project["id"],
                    "id": field["id"],
                    "data_type": field.get("dataType"),
                }
        return None

    def apply(
        self,
        response: EngagementResponse,
        owner: str,
        repo: str,
        project_number: int,
        field_name: str,
    ) -> int:
        """Writes scores for every project item; returns how many were updated."""
        field = self.get_field(owner, repo, project_number, field_name)
        if not field:
            logger.warning('Field "%s" not found in project #%s', field_name, project_number)
            return 0

        updated = 0
        for item in response.items:
            if not item.id:
                continue

            score = item.engagement.score
            if field["data_type"] == "NUMBER":
                value = {"number": score}
            else:
                value = {"text": str(score)}

            try:
                self.client.execute(
                    UPDATE_ITEM_FIELD_MUTATION,
                    {
                        "projectId": field["project_id"],
                        "itemId": item.id,
                        "fieldId": field["id"],
                        "value": value,
                    },
                )
                updated += 1
            except (requests.RequestException, ValueError) as e:
                logger.warning("Failed to update item %s: %s", item.id, e)

        logger.info("Updated %d project items with engagement scores", updated)
        return updated
