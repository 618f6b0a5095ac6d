import logging
from pathlib import Path
from typing import Type, TypeVar

import yaml
from pydantic import BaseModel

from termcanvas.utils import expand_env_vars

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _warn_unknown_keys(model: BaseModel, config_path: Path) -> None:
    if model.model_extra:
        logger.warning("Unknown keys in %s: %s", config_path, list(model.model_extra.keys()))


def load_config(path: Path, model_class: Type[T]) -> T:
    """Load and validate configuration from a YAML file.

    A missing or unreadable file yields the model defaults. A readable file
    with invalid values raises pydantic.ValidationError.

    Args:
        path: Path to the termcanvas.yml file.
        model_class: The Pydantic model class to use for validation.
    """
    if not path.exists():
        return model_class()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return model_class()

    if not isinstance(raw, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return model_class()

    model = model_class.model_validate(expand_env_vars(raw))
    _warn_unknown_keys(model, path)
    return model
