"""Workflow modules for the release actions."""

from release_actions.workflows.dependabot import (
    DependabotError,
    expand_update,
    expand_updates,
    generate_dependabot,
    load_template,
)
from release_actions.workflows.merge_forward import (
    MergeForwardError,
    decide,
    merge_forward,
    origin_branch_from_ref,
)

__all__ = [
    # Dependabot expansion
    "generate_dependabot",
    "load_template",
    "expand_update",
    "expand_updates",
    "DependabotError",
    # Merge forward
    "merge_forward",
    "decide",
    "origin_branch_from_ref",
    "MergeForwardError",
]
