# src/issue_engagement/engine/scorer.py

"""Deterministic engagement scoring for a single issue."""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol

from ..utils.helpers import days_since, round_half_up
from .classifier import classify
from .history import historical_view
from .models import ActivityRecord, EngagementScore, Reaction, RepoRef
from .weights import ContributorRole, EngagementWeights, UserGroups, get_weight_for_role

logger = logging.getLogger(__name__)

# Linked pull requests are not tracked yet; the term stays in the formula.
LINKED_PULL_REQUESTS = 0


class RoleResolver(Protocol):
    """Classifies a participant of an issue."""

    def resolve_role(
        self, login: str, repo: RepoRef, groups: UserGroups
    ) -> ContributorRole: ...


def unique_contributors(activity: ActivityRecord) -> List[str]:
    """Distinct logins of the author, assignees and comment authors, in order."""
    logins = [activity.author.login]
    logins.extend(assignee.login for assignee in activity.assignees)
    logins.extend(comment.author.login for comment in activity.comments)
    return list(dict.fromkeys(logins))


def all_reactions(activity: ActivityRecord) -> List[Reaction]:
    """Reactions on the issue itself followed by those on its comments."""
    reactions = list(activity.reactions)
    for comment in activity.comments:
        reactions.extend(comment.reactions)
    return reactions


class EngagementScorer:
    """Calculates engagement scores from issue activity.

    Without a role resolver every event counts with its factor's base
    weight. With one, each comment, reaction and distinct contributor is
    weighted by the role of the person behind it.
    """

    def __init__(
        self,
        weights: EngagementWeights,
        groups: Optional[UserGroups] = None,
        role_resolver: Optional[RoleResolver] = None,
    ):
        self.weights = weights
        self.groups = groups or UserGroups()
        self.role_resolver = role_resolver

    @property
    def role_aware(self) -> bool:
        # With no overrides every role resolves to base, so skip the lookups.
        return self.role_resolver is not None and self.weights.has_role_overrides()

    def _resolve_role(self, login: str, repo: RepoRef) -> ContributorRole:
        try:
            return self.role_resolver.resolve_role(login, repo, self.groups)
        except Exception as e:
            logger.warning("Failed to detect role for %s in %s: %s", login, repo, e)
            return ContributorRole.BASE

    def _role_lookup(self, activity: ActivityRecord) -> Callable[[str], ContributorRole]:
        """Builds a per-issue role lookup; flat mode always answers BASE."""
        if not self.role_aware:
            return lambda login: ContributorRole.BASE

        repo = activity.repo_ref
        roles: Dict[str, ContributorRole] = {}

        def role_of(login: str) -> ContributorRole:
            if login not in roles:
                roles[login] = self._resolve_role(login, repo)
            return roles[login]

        return role_of

    def calculate_breakdown(
        self, activity: ActivityRecord, now: datetime
    ) -> Dict[str, float]:
        """Returns the weighted contribution of each scoring factor."""
        weights = self.weights
        role_of = self._role_lookup(activity)

        comments_score = sum(
            get_weight_for_role(weights.comments, role_of(comment.author.login))
            for comment in activity.comments
        )
        reactions_score = sum(
            get_weight_for_role(weights.reactions, role_of(reaction.user.login))
            for reaction in all_reactions(activity)
        )
        contributors_score = sum(
            get_weight_for_role(weights.contributors, role_of(login))
            for login in unique_contributors(activity)
        )

        return {
            "comments": comments_score,
            "reactions": reactions_score,
            "contributors": contributors_score,
            "last_activity": weights.last_activity
            / days_since(activity.updated_at, now),
            "issue_age": weights.issue_age / days_since(activity.created_at, now),
            "linked_pull_requests": weights.linked_pull_requests
            * LINKED_PULL_REQUESTS,
        }

    def calculate_score(self, activity: ActivityRecord, now: datetime) -> int:
        """Calculates the rounded engagement score of an issue as of `now`."""
        return round_half_up(sum(self.calculate_breakdown(activity, now).values()))

    def calculate_historical_score(self, activity: ActivityRecord, now: datetime) -> int:
        """Calculates the score the issue had seven days before `now`."""
        return self.calculate_score(historical_view(activity, now), now)

    def score_engagement(self, activity: ActivityRecord, now: datetime) -> EngagementScore:
        """Scores an issue now and a week ago, and classifies the trend."""
        score = self.calculate_score(activity, now)
        previous_score = self.calculate_historical_score(activity, now)
        return EngagementScore(
            score=score,
            previous_score=previous_score,
            classification=classify(score, previous_score),
        )


def calculate_score(
    activity: ActivityRecord,
    weights: EngagementWeights,
    now: datetime,
    role_resolver: Optional[RoleResolver] = None,
    groups: Optional[UserGroups] = None,
) -> int:
    return EngagementScorer(weights, groups, role_resolver).calculate_score(
        activity, now
    )


def calculate_historical_score(
    activity: ActivityRecord,
    weights: EngagementWeights,
    now: datetime,
    role_resolver: Optional[RoleResolver] = None,
    groups: Optional[UserGroups] = None,
) -> int:
    return EngagementScorer(weights, groups, role_resolver).calculate_historical_score(
        activity, now
    )
