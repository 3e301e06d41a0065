# src/issue_engagement/engine/runner.py

"""Scores a single issue or a whole project board."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional, Protocol

import requests

from ..utils.helpers import now_utc
from .models import (
    ActivityRecord,
    EngagementIssue,
    EngagementItem,
    EngagementProject,
    EngagementResponse,
    ProjectDetails,
)
from .scorer import EngagementScorer

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class ActivitySupplier(Protocol):
    def fetch_issue(self, owner: str, repo: str, number: int) -> ActivityRecord: ...

    def fetch_project(
        self, owner: str, repo: str, project_number: int
    ) -> Optional[ProjectDetails]: ...


class EngagementRunner:
    """Runs a scoring pass in which every item shares the same "now"."""

    def __init__(
        self,
        supplier: ActivitySupplier,
        scorer: EngagementScorer,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.supplier = supplier
        self.scorer = scorer
        self.max_workers = max(1, max_workers)
        self.clock = clock

    def create_item(
        self,
        activity: ActivityRecord,
        now: datetime,
        project_item_id: Optional[str] = None,
    ) -> EngagementItem:
        """Scores one issue and wraps the result with its identity."""
        return EngagementItem(
            id=project_item_id,
            issue=EngagementIssue(
                id=activity.id,
                owner=activity.owner,
                repo=activity.repo,
                number=activity.number,
            ),
            engagement=self.scorer.score_engagement(activity, now),
        )

    def score_issue(self, owner: str, repo: str, number: int) -> EngagementResponse:
        logger.info("Calculating engagement score for issue %s/%s#%s", owner, repo, number)
        now = self.clock()
        activity = self.supplier.fetch_issue(owner, repo, number)
        item = self.create_item(activity, now)
        return EngagementResponse(items=[item], total_items=1)

    def score_project(
        self, owner: str, repo: str, project_number: int
    ) -> EngagementResponse:
        """Scores every issue on a project board with a bounded worker pool."""
        logger.info("Calculating engagement scores for project #%s", project_number)
        now = self.clock()
        project = self.supplier.fetch_project(owner, repo, project_number)

        if not project or not project.items:
            logger.warning("No project items found or unable to determine project ID")
            return EngagementResponse(items=[], total_items=0)

        logger.info("Found %d items in project #%s", len(project.items), project_number)

        def score_project_item(project_item):
            activity = self.supplier.fetch_issue(
                project_item.owner, project_item.repo, project_item.number
            )
            return self.create_item(activity, now, project_item.id)

        items = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                (project_item, executor.submit(score_project_item, project_item))
                for project_item in project.items
            ]
            for project_item, future in futures:
                try:
                    items.append(future.result())
                except (requests.RequestException, ValueError, KeyError) as e:
                    logger.warning(
                        "Skipping %s/%s#%s: %s",
                        project_item.owner,
                        project_item.repo,
                        project_item.number,
                        e,
                    )

        return EngagementResponse(
            project=EngagementProject(
                id=project.id, owner=project.owner, number=project.number
            ),
            items=items,
            total_items=len(items),
        )
