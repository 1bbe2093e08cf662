import logging

import pytest

from inkwell.config import DEFAULT_CONFIG, content_dir_for, load_config
from inkwell.errors import ConfigError


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path)
    assert config == DEFAULT_CONFIG
    assert content_dir_for(tmp_path, config) == (tmp_path / "content").resolve()


def test_file_overrides_defaults(tmp_path, caplog):
    (tmp_path / "inkwell.yaml").write_text(
        "content_dir: site\nstrict: true\nthemes: dark\n", encoding="utf-8"
    )
    with caplog.at_level(logging.WARNING, logger="inkwell.config"):
        config = load_config(tmp_path)
    assert config["content_dir"] == "site"
    assert config["strict"] is True
    assert config["default_menu"] == "main"
    assert "themes" not in config
    assert "themes" in caplog.text
    assert content_dir_for(tmp_path, config) == (tmp_path / "site").resolve()


def test_empty_file_uses_defaults(tmp_path):
    (tmp_path / "inkwell.yaml").write_text("", encoding="utf-8")
    assert load_config(tmp_path) == DEFAULT_CONFIG


@pytest.mark.parametrize("text", ["- a\n- b\n", "content_dir: [unclosed\n"])
def test_invalid_config(tmp_path, text):
    path = tmp_path / "inkwell.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)
    assert excinfo.value.source_path == path


@pytest.mark.parametrize(
    "text, key",
    [
        ('strict: "no"\n', "'strict'"),
        ("extensions: md\n", "'extensions'"),
        ("extensions: [.md, 3]\n", "'extensions'"),
        ("content_dir: [a, b]\n", "'content_dir'"),
    ],
)
def test_wrongly_typed_values_are_rejected(tmp_path, text, key):
    (tmp_path / "inkwell.yaml").write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)
    assert key in excinfo.value.message
