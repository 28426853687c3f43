"""Expand a Dependabot template into one update entry per target branch."""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from release_actions.models import DependabotConfig, Ecosystem
from release_actions.utils.logger import get_logger

logger = get_logger(__name__)

ECOSYSTEM_KEY = "package-ecosystem"
TARGET_BRANCH_KEY = "target-branch"


class DependabotError(Exception):
    """Raised when the template cannot be loaded or expanded."""

    pass


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that writes shared values out instead of using anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def load_template(path: Path) -> Dict[str, Any]:
    """Load a Dependabot template.

    Raises:
        DependabotError: If the file is unreadable or not a template document
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            template = yaml.safe_load(f)
    except OSError as e:
        raise DependabotError(f"Failed to read template {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise DependabotError(f"Template {path} is not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise DependabotError(f"Failed to parse template {path}: {e}") from e

    if not isinstance(template, dict):
        raise DependabotError(f"Template {path} must be a mapping")

    updates = template.get("updates")
    if not isinstance(updates, list):
        raise DependabotError(f"Template {path} must contain an 'updates' list")

    return template


def expand_update(update: Mapping[str, Any], branches: Sequence[str]) -> List[Dict[str, Any]]:
    """Copy an update once per branch, setting its target branch."""
    return [{**update, TARGET_BRANCH_KEY: branch} for branch in branches]


def expand_updates(
    updates: Sequence[Mapping[str, Any]],
    branches_by_ecosystem: Mapping[Ecosystem, Sequence[str]],
) -> List[Dict[str, Any]]:
    """Expand every update for its ecosystem's branches, keeping template order.

    Updates for other ecosystems are dropped.
    """
    resolved: List[Dict[str, Any]] = []
    for update in updates:
        ecosystem = update.get(ECOSYSTEM_KEY) if isinstance(update, Mapping) else None
        try:
            branches = branches_by_ecosystem[Ecosystem(ecosystem)]
        except (KeyError, ValueError):
            logger.warning(f"Skipping update with unsupported {ECOSYSTEM_KEY}: {ecosystem!r}")
            continue
        resolved.extend(expand_update(update, branches))
    return resolved


def render(document: Mapping[str, Any]) -> str:
    """Serialize a document as block-style YAML in insertion order."""
    return yaml.dump(
        dict(document),
        Dumper=_NoAliasDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def generate_dependabot(config: DependabotConfig) -> Dict[str, Any]:
    """Expand the configured template and write the Dependabot file.

    Returns:
        The written document

    Raises:
        DependabotError: If the template is invalid or the output cannot be written
    """
    template = load_template(config.template_file)
    resolved = expand_updates(template["updates"], config.branches_by_ecosystem())
    logger.info(f"Resolved {len(resolved)} updates from {len(template['updates'])} template entries")
    for update in resolved:
        logger.debug(f"Resolved update {update}")

    template["updates"] = resolved
    content = render(template)
    logger.info("Final template:")
    logger.info(content)

    logger.info(f"Writing to {config.output_file}")
    try:
        config.output_file.parent.mkdir(parents=True, exist_ok=True)
        config.output_file.write_text(content, encoding="utf-8")
    except OSError as e:
        raise DependabotError(f"Failed to write {config.output_file}: {e}") from e

    return template
