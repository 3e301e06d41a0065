# src/issue_engagement/engine/models.py

"""Data models for issue activity and engagement results."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

GHOST_LOGIN = "ghost"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class UserInfo(_Model):
    """A participant identity."""

    login: str = GHOST_LOGIN
    type: str = "User"


class Reaction(_Model):
    user: UserInfo = Field(default_factory=UserInfo)
    content: str = ""
    created_at: datetime = Field(alias="createdAt")


class Comment(_Model):
    author: UserInfo = Field(default_factory=UserInfo)
    created_at: datetime = Field(alias="createdAt")
    reactions: List[Reaction] = Field(default_factory=list)

    @field_validator("reactions", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RepoRef(_Model):
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


class ActivityRecord(_Model):
    """The observed state of one issue."""

    id: str
    owner: str
    repo: str
    number: int
    title: str = ""
    body: str = ""
    state: str = "OPEN"
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    closed_at: Optional[datetime] = Field(default=None, alias="closedAt")
    author: UserInfo = Field(default_factory=UserInfo)
    assignees: List[UserInfo] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    reactions: List[Reaction] = Field(default_factory=list)

    @field_validator("assignees", "comments", "reactions", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("body", "title", mode="before")
    @classmethod
    def none_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def repo_ref(self) -> RepoRef:
        return RepoRef(owner=self.owner, name=self.repo)


class ProjectItem(_Model):
    """An issue placed on a project board."""

    id: str
    owner: str
    repo: str
    number: int


class ProjectDetails(_Model):
    id: str
    owner: str
    number: int
    items: List[ProjectItem] = Field(default_factory=list)


class EngagementClassification(str, Enum):
    HOT = "Hot"


class EngagementScore(_Model):
    score: int
    previous_score: int = Field(alias="previousScore")
    classification: Optional[EngagementClassification] = None


class EngagementIssue(_Model):
    id: str
    owner: str
    repo: str
    number: int


class EngagementItem(_Model):
    id: Optional[str] = None
    issue: EngagementIssue
    engagement: EngagementScore


class EngagementProject(_Model):
    id: str
    owner: str
    number: int


class EngagementResponse(_Model):
    """The unit handed to result consumers."""

    project: Optional[EngagementProject] = None
    items: List[EngagementItem] = Field(default_factory=list)
    total_items: int = Field(default=0, alias="totalItems")

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
