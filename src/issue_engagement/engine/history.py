# src/issue_engagement/engine/history.py

"""Derives the state of an issue as it stood a week earlier."""

from datetime import datetime, timedelta
from typing import List

from .models import ActivityRecord, Comment, Reaction

HISTORY_WINDOW = timedelta(days=7)


def _reactions_until(reactions: List[Reaction], cutoff: datetime) -> List[Reaction]:
    return [reaction for reaction in reactions if reaction.created_at <= cutoff]


def historical_view(activity: ActivityRecord, now: datetime) -> ActivityRecord:
    """Returns the subset of `activity` visible seven days before `now`.

    Issues younger than the window have no meaningful earlier state, so
    their comments and reactions are dropped entirely. Otherwise comments
    and reactions (including those nested in comments) are cut off at the
    window boundary and the last update is pinned to it. Author, assignees
    and creation time are kept as they are.
    """
    cutoff = now - HISTORY_WINDOW

    if activity.created_at > cutoff:
        return activity.model_copy(update={"comments": [], "reactions": []})

    comments: List[Comment] = [
        comment.model_copy(
            update={"reactions": _reactions_until(comment.reactions, cutoff)}
        )
        for comment in activity.comments
        if comment.created_at <= cutoff
    ]

    return activity.model_copy(
        update={
            "comments": comments,
            "reactions": _reactions_until(activity.reactions, cutoff),
            "updated_at": cutoff,
        }
    )
