# tests/test_data/test_projects.py

from unittest.mock import Mock

import pytest
import requests

from issue_engagement.data.projects import (
    PROJECT_FIELDS_QUERY,
    UPDATE_ITEM_FIELD_MUTATION,
    ProjectScoreWriter,
)
from issue_engagement.engine.models import (
    EngagementIssue,
    EngagementItem,
    EngagementResponse,
    EngagementScore,
)


def _fields_response(data_type="NUMBER"):
    return {
        "repository": {
            "projectV2": {
                "id": "PVT_1",
                "fields": {
                    "nodes": [
                        {"id": "F_title", "name": "Title", "dataType": "TITLE"},
                        {},
                        {"id": "F_eng", "name": "Engagement", "dataType": data_type},
                    ]
                },
            }
        }
    }


def _item(item_id, number, score):
    return EngagementItem(
        id=item_id,
        issue=EngagementIssue(id=f"I_{number}", owner="o", repo="r", number=number),
        engagement=EngagementScore(score=score, previous_score=0),
    )


@pytest.fixture
def response():
    return EngagementResponse(
        items=[_item("PVTI_1", 1, 22), _item(None, 2, 5), _item("PVTI_3", 3, 7)],
        total_items=3,
    )


def _mutation_values(client):
    return [
        variables
        for query, variables in (c.args for c in client.execute.call_args_list)
        if query == UPDATE_ITEM_FIELD_MUTATION
    ]


def test_apply_writes_number_fields(response):
    client = Mock()
    client.execute.side_effect = lambda query, variables: (
        _fields_response() if query == PROJECT_FIELDS_QUERY else {}
    )

    updated = ProjectScoreWriter(client).apply(response, "o", "r", 5, "Engagement")

    # Items without a project item id are skipped
    assert updated == 2
    values = _mutation_values(client)
    assert [v["itemId"] for v in values] == ["PVTI_1", "PVTI_3"]
    assert values[0] == {
        "projectId": "PVT_1",
        "itemId": "PVTI_1",
        "fieldId": "F_eng",
        "value": {"number": 22},
    }


def test_apply_writes_text_fields(response):
    client = Mock()
    client.execute.side_effect = lambda query, variables: (
        _fields_response("TEXT") if query == PROJECT_FIELDS_QUERY else {}
    )

    ProjectScoreWriter(client).apply(response, "o", "r", 5, "Engagement")

    assert _mutation_values(client)[1]["value"] == {"text": "7"}


def test_apply_skips_when_field_missing(response, caplog):
    client = Mock()
    client.execute.return_value = _fields_response()

    updated = ProjectScoreWriter(client).apply(response, "o", "r", 5, "Heat")

    assert updated == 0
    assert client.execute.call_count == 1
    assert 'Field "Heat" not found' in caplog.text


def test_apply_continues_after_item_failure(response, caplog):
    def execute(query, variables):
        if query == PROJECT_FIELDS_QUERY:
            return _fields_response()
        if variables["itemId"] == "PVTI_1":
            raise requests.HTTPError("403")
        return {}

    client = Mock()
    client.execute.side_effect = execute

    updated = ProjectScoreWriter(client).apply(response, "o", "r", 5, "Engagement")

    assert updated == 1
    assert "Failed to update item PVTI_1" in caplog.text
