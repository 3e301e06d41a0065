# src/issue_engagement/engine/classifier.py

from typing import Optional

from .models import EngagementClassification


def classify(current: int, previous: int) -> Optional[EngagementClassification]:
    """Labels an issue Hot when its score grew over the historical baseline."""
    if current > previous:
        return EngagementClassification.HOT
    return None
