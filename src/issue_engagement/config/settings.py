# src/issue_engagement/config/settings.py
"""Settings and environment variables for the engagement scorer."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    github_token: str
    github_owner: str
    github_repo: str
    project_number: Optional[int] = None
    issue_number: Optional[int] = None
    project_column: str = "Engagement"
    apply_scores: bool = False
    max_workers: int = 4
    request_timeout: float = 30

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("project_number", "issue_number", mode="before")
    @classmethod
    def parse_optional_number(cls, value) -> Optional[int]:
        """Treat empty strings and non-positive numbers as unset."""
        if value in (None, ""):
            return None
        number = int(value)
        return number if number > 0 else None


def get_settings(**overrides) -> Settings:
    """Get the application settings."""
    # Pydantic will automatically handle loading from .env and validation
    return Settings(**overrides)
