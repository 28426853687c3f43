"""GitHub Actions runner integration.

Reads action inputs from the environment and reports failures using the
runner's workflow commands.
"""

import os
from typing import Optional

import click

from release_actions.utils.logger import get_logger

logger = get_logger(__name__)


def input_env_name(name: str) -> str:
    """Environment variable holding an action input.

    The runner upper-cases the input name and replaces spaces with
    underscores; hyphens are kept (``from-author`` -> ``INPUT_FROM-AUTHOR``).
    """
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, required: bool = False) -> Optional[str]:
    """Get an action input.

    Args:
        name: Input name as declared in action.yml
        required: Raise if the input is missing or blank

    Returns:
        Trimmed input value, or None when not provided
    """
    value = os.environ.get(input_env_name(name))
    if value is None or not value.strip():
        if required:
            raise ValueError(f"Input required and not supplied: {name}")
        return None
    return value.strip()


def get_boolean_input(name: str) -> Optional[bool]:
    """Get a boolean action input; only the exact string 'true' is true."""
    value = get_input(name)
    if value is None:
        return None
    return value == "true"


def get_ref() -> Optional[str]:
    """Ref that triggered the workflow (``GITHUB_REF``)."""
    return os.environ.get("GITHUB_REF") or None


def escape_data(message: str) -> str:
    """Escape a workflow command message."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str) -> None:
    """Report a failure through the runner's error annotation."""
    logger.debug(f"Reporting failure: {message}")
    click.echo(f"::error::{escape_data(message)}")
