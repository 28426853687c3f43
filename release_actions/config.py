"""Configuration management for release actions."""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from release_actions.integrations import actions
from release_actions.models import Config, DependabotConfig, MergeForwardConfig
from release_actions.utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# action input name -> (model field, is boolean)
MERGE_FORWARD_INPUTS = {
    "from-author": ("from_author", False),
    "branches": ("branches", False),
    "merge-strategy": ("merge_strategy", False),
    "dry-run": ("dry_run", True),
    "use-author-email": ("use_author_email", True),
}

DEPENDABOT_INPUTS = {
    "gradle-branches": ("gradle_branches", False),
    "github-actions-branches": ("github_actions_branches", False),
    "template-file": ("template_file", False),
    "output-file": ("output_file", False),
}


class ConfigError(Exception):
    """Configuration error."""
    pass


class ConfigManager:
    """Resolves command settings from a config file, action inputs and CLI options.

    Precedence, lowest first:
    1. Model defaults
    2. Config file section (``merge_forward`` / ``dependabot``)
    3. Action inputs (``INPUT_*`` environment variables)
    4. Explicit CLI options
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional YAML config file
        """
        self._config_path = config_path
        self._config: Optional[Config] = None

    def _expand_env_vars(self, data: Any) -> Any:
        """Recursively expand environment variables in configuration data.

        Supports formats:
        - ${VAR}
        - ${VAR:-default}
        - $VAR (simple format)
        """
        if isinstance(data, str):
            def replace_env_var(match):
                var_expr = match.group(1)
                if ":-" in var_expr:
                    var_name, default_value = var_expr.split(":-", 1)
                    return os.getenv(var_name, default_value)
                var_value = os.getenv(var_expr)
                if var_value is None:
                    logger.warning(f"Environment variable '{var_expr}' not found")
                    return match.group(0)
                return var_value

            data = re.sub(r'\$\{([^}]+)\}', replace_env_var, data)

            def replace_simple_var(match):
                var_value = os.getenv(match.group(1))
                if var_value is None:
                    logger.warning(f"Environment variable '{match.group(1)}' not found")
                    return match.group(0)
                return var_value

            data = re.sub(r'\$([A-Z_][A-Z0-9_]*)', replace_simple_var, data)

        elif isinstance(data, dict):
            return {key: self._expand_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._expand_env_vars(item) for item in data]

        return data

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load and parse YAML configuration file.

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        logger.debug(f"Loading config file: {path}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        return self._expand_env_vars(data)

    def get_config(self) -> Config:
        """Get file-level configuration, loading it on first use."""
        if self._config is None:
            data = self._load_yaml_file(self._config_path) if self._config_path else {}
            try:
                self._config = Config.model_validate(data)
            except ValidationError as e:
                raise ConfigError(f"Invalid configuration: {e}") from e
        return self._config

    def _read_inputs(self, inputs: Dict[str, tuple]) -> Dict[str, Any]:
        """Read action inputs that are set."""
        values: Dict[str, Any] = {}
        for input_name, (field, is_bool) in inputs.items():
            value = (
                actions.get_boolean_input(input_name)
                if is_bool
                else actions.get_input(input_name)
            )
            if value is not None:
                values[field] = value
                logger.debug(f"Applied action input: {input_name}")
        return values

    def _resolve(
        self,
        model: Type[ModelT],
        section: Dict[str, Any],
        inputs: Dict[str, tuple],
        overrides: Optional[Dict[str, Any]],
        extra: Optional[Dict[str, Any]] = None,
    ) -> ModelT:
        data: Dict[str, Any] = dict(extra or {})
        data.update(section)
        data.update(self._read_inputs(inputs))
        data.update({k: v for k, v in (overrides or {}).items() if v is not None})
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid {model.__name__} settings: {e}") from e

    def merge_forward_config(self, overrides: Optional[Dict[str, Any]] = None) -> MergeForwardConfig:
        """Resolve merge-forward settings.

        Args:
            overrides: Explicit values, ``None`` entries are ignored

        Raises:
            ConfigError: If required settings are missing or invalid
        """
        return self._resolve(
            MergeForwardConfig,
            self.get_config().merge_forward,
            MERGE_FORWARD_INPUTS,
            overrides,
            extra={"ref": actions.get_ref()},
        )

    def dependabot_config(self, overrides: Optional[Dict[str, Any]] = None) -> DependabotConfig:
        """Resolve generate-dependabot settings.

        Raises:
            ConfigError: If required settings are missing or invalid
        """
        return self._resolve(
            DependabotConfig,
            self.get_config().dependabot,
            DEPENDABOT_INPUTS,
            overrides,
        )
