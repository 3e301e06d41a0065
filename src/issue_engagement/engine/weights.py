# src/issue_engagement/engine/weights.py

"""Weight model for engagement scoring.

Weights come from configuration in one of two shapes: a bare number applied
to every contributor, or a role-keyed mapping such as
``{"base": 3, "partner": 5}``. Both are resolved once, at normalization
time, into ``RoleBasedWeights`` so the scorer never has to inspect the raw
shape again.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class ContributorRole(str, Enum):
    """Coarse classification of an issue participant."""

    BASE = "base"
    MAINTAINER = "maintainer"
    PARTNER = "partner"
    FIRST_TIME = "firstTime"
    FREQUENT = "frequent"


class RoleBasedWeights(BaseModel):
    """A base weight plus optional per-role overrides."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base: float
    maintainer: Optional[float] = None
    partner: Optional[float] = None
    first_time: Optional[float] = Field(default=None, alias="firstTime")
    frequent: Optional[float] = None

    def for_role(self, role: ContributorRole) -> float:
        """Returns the override for `role`, falling back to the base weight."""
        field_name = _ROLE_FIELDS.get(role)
        if field_name is None:
            return self.base
        override = getattr(self, field_name)
        return self.base if override is None else override

    def has_overrides(self) -> bool:
        return any(getattr(self, name) is not None for name in _ROLE_FIELDS.values())


_ROLE_FIELDS = {
    ContributorRole.MAINTAINER: "maintainer",
    ContributorRole.PARTNER: "partner",
    ContributorRole.FIRST_TIME: "first_time",
    ContributorRole.FREQUENT: "frequent",
}

WeightSpec = Union[RoleBasedWeights, float]

# Built-in defaults, keyed by configuration name
DEFAULT_WEIGHTS: Dict[str, float] = {
    "comments": 3,
    "reactions": 1,
    "contributors": 2,
    "lastActivity": 1,
    "issueAge": 1,
    "linkedPullRequests": 2,
}

ROLE_WEIGHTED_FACTORS = ("comments", "reactions", "contributors")
FLAT_FACTORS = ("lastActivity", "issueAge", "linkedPullRequests")


class EngagementWeights(BaseModel):
    """Canonical weights consumed by the scorer."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    comments: WeightSpec = RoleBasedWeights(base=DEFAULT_WEIGHTS["comments"])
    reactions: WeightSpec = RoleBasedWeights(base=DEFAULT_WEIGHTS["reactions"])
    contributors: WeightSpec = RoleBasedWeights(base=DEFAULT_WEIGHTS["contributors"])
    last_activity: float = Field(
        default=DEFAULT_WEIGHTS["lastActivity"], alias="lastActivity"
    )
    issue_age: float = Field(default=DEFAULT_WEIGHTS["issueAge"], alias="issueAge")
    linked_pull_requests: float = Field(
        default=DEFAULT_WEIGHTS["linkedPullRequests"], alias="linkedPullRequests"
    )

    def has_role_overrides(self) -> bool:
        """True when any factor weighs some role differently from its base."""
        return any(
            isinstance(spec, RoleBasedWeights) and spec.has_overrides()
            for spec in (self.comments, self.reactions, self.contributors)
        )

    def to_config(self) -> Dict[str, Any]:
        """Dumps the weights in their configuration-file form."""
        return self.model_dump(by_alias=True, exclude_none=True)


class UserGroups(BaseModel):
    """Login lists used during role detection."""

    partner: List[str] = Field(default_factory=list)
    internal: List[str] = Field(default_factory=list)

    @field_validator("partner", "internal", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def get_weight_for_role(spec: WeightSpec, role: ContributorRole) -> float:
    """Resolves the weight `spec` assigns to `role`.

    A bare number applies to every role. A role-keyed spec returns the
    role's own entry when present and its ``base`` otherwise.
    """
    if isinstance(spec, RoleBasedWeights):
        return spec.for_role(role)
    return spec


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_role_weight(name: str, value: Any) -> RoleBasedWeights:
    default = DEFAULT_WEIGHTS[name]
    if value is None:
        return RoleBasedWeights(base=default)
    if isinstance(value, RoleBasedWeights):
        return value
    if _is_number(value):
        return RoleBasedWeights(base=value)
    if isinstance(value, Mapping):
        data = dict(value)
        data.setdefault("base", default)
        try:
            return RoleBasedWeights.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Invalid %s weights %r, using default %s: %s", name, value, default, e
            )
            return RoleBasedWeights(base=default)

    logger.warning("Invalid %s weight %r, using default %s", name, value, default)
    return RoleBasedWeights(base=default)


def _normalize_flat_weight(name: str, value: Any) -> float:
    default = DEFAULT_WEIGHTS[name]
    if value is None:
        return default
    if _is_number(value):
        return value

    logger.warning("Invalid %s weight %r, using default %s", name, value, default)
    return default


def normalize_weights(raw: Optional[Mapping[str, Any]]) -> EngagementWeights:
    """Builds canonical weights from a raw configuration mapping.

    Explicit values win over built-in defaults. Bare numbers for the
    role-weighted factors become ``RoleBasedWeights(base=n)``; role mappings
    pass through without filling in absent roles.
    """
    if raw is not None and not isinstance(raw, Mapping):
        logger.warning("Ignoring weights of type %s, using defaults", type(raw).__name__)
        raw = None
    raw = raw or {}
    normalized: Dict[str, Any] = {}

    for name in ROLE_WEIGHTED_FACTORS:
        normalized[name] = _normalize_role_weight(name, raw.get(name))

    for name in FLAT_FACTORS:
        normalized[name] = _normalize_flat_weight(name, raw.get(name))

    return EngagementWeights.model_validate(normalized)
