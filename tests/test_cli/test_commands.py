# tests/test_cli/test_commands.py

import json
from unittest.mock import patch

from click.testing import CliRunner

from issue_engagement.__main__ import main
from issue_engagement.engine.models import (
    EngagementIssue,
    EngagementItem,
    EngagementResponse,
    EngagementScore,
)


def test_weights_json_fills_in_defaults(tmp_path):
    (tmp_path / ".triagerc.yml").write_text("engagement:\n  weights:\n    comments: 5\n")

    result = CliRunner().invoke(main, ["weights", "--workspace", str(tmp_path), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["weights"] == {
        "comments": {"base": 5},
        "reactions": {"base": 1},
        "contributors": {"base": 2},
        "lastActivity": 1,
        "issueAge": 1,
        "linkedPullRequests": 2,
    }


def test_weights_table(tmp_path):
    config = tmp_path / "triage.yml"
    config.write_text("engagement:\n  weights:\n    comments:\n      base: 3\n      partner: 5\n")

    result = CliRunner().invoke(main, ["weights", "--config", str(config)])

    assert result.exit_code == 0
    assert "Engagement Weights" in result.output
    assert "comments" in result.output


def test_score_requires_issue_or_project(mock_env_vars, tmp_path):
    result = CliRunner().invoke(main, ["score", "--workspace", str(tmp_path)])

    assert result.exit_code == 2
    assert "Either --project or --issue must be specified" in result.output


@patch("issue_engagement.cli.score.EngagementRunner")
def test_score_issue_writes_response(mock_runner, mock_env_vars, tmp_path):
    mock_runner.return_value.score_issue.return_value = EngagementResponse(
        items=[
            EngagementItem(
                issue=EngagementIssue(id="I_1", owner="test-owner", repo="test-repo", number=1),
                engagement=EngagementScore(score=22, previous_score=13, classification="Hot"),
            )
        ],
        total_items=1,
    )
    output = tmp_path / "out.json"

    result = CliRunner().invoke(
        main,
        ["score", "--issue", "1", "--workspace", str(tmp_path), "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    mock_runner.return_value.score_issue.assert_called_once_with(
        "test-owner", "test-repo", 1
    )
    saved = json.loads(output.read_text())
    assert saved["totalItems"] == 1
    assert saved["items"][0]["engagement"] == {
        "score": 22,
        "previousScore": 13,
        "classification": "Hot",
    }


@patch("issue_engagement.cli.score.EngagementRunner")
def test_score_reports_api_errors(mock_runner, mock_env_vars, tmp_path):
    mock_runner.return_value.score_issue.side_effect = ValueError(
        "GraphQL API returned errors: Bad credentials"
    )

    result = CliRunner().invoke(
        main,
        [
            "score",
            "--issue",
            "1",
            "--workspace",
            str(tmp_path),
            "--output",
            str(tmp_path / "out.json"),
        ],
    )

    assert result.exit_code == 1
    assert "Bad credentials" in result.output


@patch("issue_engagement.cli.score.GitHubRoleResolver")
@patch("issue_engagement.cli.score.EngagementRunner")
def test_score_shares_one_clock_between_roles_and_runner(
    mock_runner, mock_resolver, mock_env_vars, tmp_path
):
    mock_runner.return_value.score_issue.return_value = EngagementResponse(
        items=[], total_items=0
    )

    result = CliRunner().invoke(
        main,
        [
            "score",
            "--issue",
            "1",
            "--workspace",
            str(tmp_path),
            "--output",
            str(tmp_path / "out.json"),
        ],
    )

    assert result.exit_code == 0, result.output
    resolver_clock = mock_resolver.call_args.kwargs["clock"]
    runner_clock = mock_runner.call_args.kwargs["clock"]
    assert resolver_clock is runner_clock
    assert resolver_clock() == runner_clock()
