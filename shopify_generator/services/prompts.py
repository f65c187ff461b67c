"""Prompt loading for the vision client.

The copywriting prompt lives in ``shopify_generator/prompts/product_copy.yaml``
so it can be tuned without touching code.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from shopify_generator.core.errors import ConfigurationError


logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"
PRODUCT_COPY_PROMPT = PROMPTS_DIR / "product_copy.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a prompt YAML file, failing loudly when it is unusable."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigurationError(f"Prompt file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse prompt YAML {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Prompt file {path} must contain a mapping")
    return data


@lru_cache(maxsize=4)
def get_product_prompt(path: Path = PRODUCT_COPY_PROMPT) -> str:
    """Return the user prompt that accompanies every product photo."""
    data = load_yaml_file(path)
    prompt = str(data.get("user_prompt") or "").strip()
    if not prompt:
        raise ConfigurationError(f"Prompt file {path} has no 'user_prompt'")
    logger.debug("Loaded product prompt v%s (%d chars)", data.get("version", "?"), len(prompt))
    return prompt
