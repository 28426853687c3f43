"""Data models for release actions."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_REMOTE = "origin"
DEFAULT_MERGE_STRATEGY = "ours"
DEFAULT_DEPENDABOT_FILE = Path(".github/dependabot.yml")


def split_branches(value: Any) -> Any:
    """Split a comma-separated branch input, trimming items and dropping blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


class Ecosystem(str, Enum):
    """Package ecosystems with a configured branch list."""

    GRADLE = "gradle"
    GITHUB_ACTIONS = "github-actions"


class CascadeDecision(str, Enum):
    """Outcome of evaluating one adjacent branch pair."""

    CONTINUE = "continue"
    HALT_CLEAN = "halt_clean"
    HALT_INCONSISTENT = "halt_inconsistent"


class MergeForwardConfig(BaseModel):
    """Settings for merging bot commits forward across branches."""

    from_author: str = Field(description="Only author whose commits may be merged forward")
    branches: list[str] = Field(
        default_factory=list, description="Branches in merge-forward order"
    )
    merge_strategy: str = Field(
        default=DEFAULT_MERGE_STRATEGY, description="Strategy passed to 'git merge -s'"
    )
    dry_run: bool = Field(default=False, description="Merge locally but do not push")
    use_author_email: bool = Field(
        default=False, description="Attribute commits by author email instead of name"
    )
    remote: str = Field(default=DEFAULT_REMOTE, description="Remote to fetch from and push to")
    ref: str | None = Field(default=None, description="Ref of the current checkout")

    @field_validator("branches", mode="before")
    @classmethod
    def parse_branches(cls, v: Any) -> Any:
        """Accept comma-separated branch lists."""
        return split_branches(v)

    @field_validator("from_author")
    @classmethod
    def validate_from_author(cls, v: str) -> str:
        """Require a non-blank author."""
        if not v.strip():
            raise ValueError("from-author must not be empty")
        return v.strip()

    @property
    def log_format(self) -> str:
        """git log format placeholder used for attribution."""
        return "%ae" if self.use_author_email else "%an"


class DependabotConfig(BaseModel):
    """Settings for expanding a Dependabot template."""

    gradle_branches: list[str] = Field(
        default_factory=list, description="Target branches for gradle updates"
    )
    github_actions_branches: list[str] = Field(
        default_factory=list, description="Target branches for github-actions updates"
    )
    template_file: Path = Field(description="Path to the Dependabot template")
    output_file: Path = Field(
        default=DEFAULT_DEPENDABOT_FILE, description="Where the expanded file is written"
    )

    @field_validator("gradle_branches", "github_actions_branches", mode="before")
    @classmethod
    def parse_branches(cls, v: Any) -> Any:
        """Accept comma-separated branch lists."""
        return split_branches(v)

    def branches_by_ecosystem(self) -> dict[Ecosystem, list[str]]:
        """Map each recognized ecosystem to its branch list."""
        return {
            Ecosystem.GRADLE: self.gradle_branches,
            Ecosystem.GITHUB_ACTIONS: self.github_actions_branches,
        }


class CascadeState(BaseModel):
    """Branches queued for push; frozen once the cascade halts."""

    pending_pushes: list[str] = Field(default_factory=list, description="Merged branches")
    halted: bool = Field(default=False, description="Whether the cascade has stopped")

    def queue(self, branch: str) -> None:
        """Queue a merged branch for push."""
        if self.halted:
            raise RuntimeError(f"Cannot queue {branch}: cascade already halted")
        self.pending_pushes.append(branch)

    def halt(self) -> None:
        """Stop the cascade; nothing is queued afterwards."""
        self.halted = True


class PairEvaluation(BaseModel):
    """Result of inspecting one (previous, current) branch pair."""

    previous: str = Field(description="Branch merged from")
    current: str = Field(description="Branch merged into")
    commit_count: int = Field(description="Non-merge commits in previous but not current")
    authors: list[str] = Field(default_factory=list, description="Unique commit authors")
    decision: CascadeDecision = Field(description="Cascade decision for this pair")


class CascadeResult(BaseModel):
    """Summary of a merge-forward run."""

    pairs: list[PairEvaluation] = Field(default_factory=list, description="Evaluated pairs")
    pending_pushes: list[str] = Field(default_factory=list, description="Merged branches")
    pushed: bool = Field(default=False, description="Whether a push was issued")
    dry_run: bool = Field(default=False, description="Whether this was a dry run")


class Config(BaseModel):
    """File-level configuration, one section per command."""

    version: str = Field(default="1.0", description="Config version")
    merge_forward: dict[str, Any] = Field(
        default_factory=dict, description="Defaults for merge-forward"
    )
    dependabot: dict[str, Any] = Field(
        default_factory=dict, description="Defaults for generate-dependabot"
    )

    model_config = {"extra": "allow"}
