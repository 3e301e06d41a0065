"""Pytest configuration for the engagement scorer."""

from datetime import datetime, timezone
from typing import Any, Dict

import pytest

from issue_engagement.engine.models import ActivityRecord

# Use static, absolute dates for predictable test results
NOW = datetime(2023, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_user(login: str) -> Dict[str, str]:
    return {"login": login, "type": "User"}


def make_reaction(login: str, created_at: str, content: str = "THUMBS_UP"):
    return {"user": make_user(login), "content": content, "createdAt": created_at}


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_issue_data() -> Dict[str, Any]:
    """Issue created nine days before NOW with activity on both sides of the week."""
    return {
        "id": "I_kwDOTest123",
        "owner": "test-owner",
        "repo": "test-repo",
        "number": 123,
        "title": "Test Issue",
        "body": "Test issue body",
        "state": "OPEN",
        "createdAt": "2023-01-01T12:00:00Z",
        "updatedAt": "2023-01-08T12:00:00Z",
        "closedAt": None,
        "author": make_user("issue-author"),
        "assignees": [make_user("assignee1"), make_user("assignee2")],
        "reactions": [
            make_reaction("reactor1", "2023-01-02T12:00:00Z"),
            make_reaction("reactor2", "2023-01-09T12:00:00Z", "HEART"),
        ],
        "comments": [
            {
                "author": make_user("user1"),
                "createdAt": "2023-01-02T12:00:00Z",
                "reactions": [
                    make_reaction("reactor1", "2023-01-02T13:00:00Z"),
                    make_reaction("reactor3", "2023-01-05T12:00:00Z"),
                ],
            },
            {
                "author": make_user("user2"),
                "createdAt": "2023-01-09T12:00:00Z",
                "reactions": [make_reaction("reactor2", "2023-01-09T13:00:00Z")],
            },
        ],
    }


@pytest.fixture
def sample_issue(sample_issue_data) -> ActivityRecord:
    return ActivityRecord.model_validate(sample_issue_data)


@pytest.fixture
def bare_issue_data() -> Dict[str, Any]:
    """An issue with nothing but an author."""
    return {
        "id": "I_kwDOBare",
        "owner": "test-owner",
        "repo": "test-repo",
        "number": 7,
        "createdAt": "2023-01-01T12:00:00Z",
        "updatedAt": "2023-01-01T12:00:00Z",
        "author": make_user("issue-author"),
    }


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    monkeypatch.setenv("GITHUB_TOKEN", "test_token")
    monkeypatch.setenv("GITHUB_OWNER", "test-owner")
    monkeypatch.setenv("GITHUB_REPO", "test-repo")
    monkeypatch.delenv("PROJECT_NUMBER", raising=False)
    monkeypatch.delenv("ISSUE_NUMBER", raising=False)
    monkeypatch.delenv("APPLY_SCORES", raising=False)
