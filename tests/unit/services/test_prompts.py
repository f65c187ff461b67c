"""Tests for loading the bundled copywriting prompt."""

import pytest

from shopify_generator.core.errors import ConfigurationError
from shopify_generator.services.prompts import (
    PRODUCT_COPY_PROMPT,
    get_product_prompt,
    load_yaml_file,
)


def test_bundled_prompt_lists_expected_keys():
    prompt = get_product_prompt()

    for key in ("title", "body_html", "vendor", "type", "tags", "price"):
        assert key in prompt
    assert "JSON" in prompt


def test_bundled_prompt_file_has_version():
    assert load_yaml_file(PRODUCT_COPY_PROMPT)["version"] == 1


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_yaml_file(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("user_prompt: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Failed to parse"):
        load_yaml_file(path)


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="mapping"):
        load_yaml_file(path)


def test_empty_user_prompt(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("version: 2\nuser_prompt: ''\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="user_prompt"):
        get_product_prompt(path)


def test_custom_prompt_file(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("user_prompt: |\n  Describe the item.\n", encoding="utf-8")

    assert get_product_prompt(path) == "Describe the item."
