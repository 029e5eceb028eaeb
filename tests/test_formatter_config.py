import json

import pytest
import yaml
from pydantic import ValidationError

from emberwrap.core.exceptions import ConfigurationError
from emberwrap.models.formatter_config import FormatterConfig


def test_defaults():
    cfg = FormatterConfig()
    assert cfg.camel_case is True
    assert cfg.ignore_nulls is True
    assert cfg.trim_strings is True
    assert cfg.indent is None
    assert cfg.meta_key == "meta"
    assert cfg.log_level == "INFO"


def test_from_dict_accepts_none():
    assert FormatterConfig.from_dict(None) == FormatterConfig()


def test_unknown_keys_are_rejected():
    with pytest.raises(ValidationError):
        FormatterConfig.from_dict({"camelCase": False})


@pytest.mark.parametrize("bad", [{"meta_key": "  "}, {"indent": -1}, {"log_level": "TRACE"}])
def test_invalid_values_are_rejected(bad):
    with pytest.raises(ValidationError):
        FormatterConfig.from_dict(bad)


def test_from_yaml_file(tmp_path):
    path = tmp_path / "formatter.yaml"
    path.write_text(yaml.safe_dump({"camel_case": False, "indent": 2, "meta_key": "_meta"}))

    cfg = FormatterConfig.from_file(path)

    assert cfg.camel_case is False
    assert cfg.indent == 2
    assert cfg.meta_key == "_meta"


def test_from_json_file(tmp_path):
    path = tmp_path / "formatter.json"
    path.write_text(json.dumps({"ignore_nulls": False}))

    assert FormatterConfig.from_file(str(path)).ignore_nulls is False


def test_empty_yaml_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert FormatterConfig.from_file(path) == FormatterConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        FormatterConfig.from_file(tmp_path / "nope.yaml")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "formatter.toml"
    path.write_text("camel_case = false")
    with pytest.raises(ConfigurationError, match="Unsupported config format"):
        FormatterConfig.from_file(path)


def test_non_mapping_content(tmp_path):
    path = tmp_path / "formatter.yaml"
    path.write_text("- camel_case\n- indent\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        FormatterConfig.from_file(path)


def test_encoding_is_not_a_config_option():
    with pytest.raises(ValidationError):
        FormatterConfig.from_dict({"encoding": "latin-1"})
