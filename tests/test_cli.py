import json

import pytest

from emberwrap.cli import cli, inspect_type, resolve_type
from emberwrap.models.formatter_config import FormatterConfig


def test_resolve_type_accepts_both_separators():
    from decimal import Decimal

    assert resolve_type("decimal:Decimal") is Decimal
    assert resolve_type("decimal.Decimal") is Decimal
    with pytest.raises(ValueError):
        resolve_type("Decimal")


def test_inspect_scalar_type():
    assert inspect_type("decimal:Decimal") == {
        "type": "Decimal",
        "shouldEnvelope": False,
        "elementShape": "Decimal",
        "rootKey": None,
        "sideload": False,
    }


def test_inspect_domain_type_and_collection():
    single = inspect_type("emberwrap.models.formatter_config:FormatterConfig")
    many = inspect_type("emberwrap.models.formatter_config:FormatterConfig", collection=True)

    assert single["shouldEnvelope"] is True
    assert single["rootKey"] == "formatterConfig"
    assert many["type"] == "list[FormatterConfig]"
    assert many["elementShape"] == "FormatterConfig"
    assert many["rootKey"] == "formatterConfigs"


def test_inspect_honours_root_key_casing():
    report = inspect_type(
        "emberwrap.models.client_config:ApiClientConfig",
        config=FormatterConfig(camel_case=False),
    )
    assert report["rootKey"] == "api_client_config"


def test_cli_inspect_prints_report(capsys):
    assert cli(["inspect", "decimal:Decimal", "--collection"]) == 0

    out = capsys.readouterr().out
    report = json.loads(out[out.index("{"):])
    assert report["type"] == "list[Decimal]"
    assert report["shouldEnvelope"] is False


def test_cli_inspect_unknown_type(capsys):
    assert cli(["inspect", "emberwrap.nowhere:Thing"]) == 1
    assert "Cannot inspect" in capsys.readouterr().err


def test_cli_validate_config(tmp_path, capsys):
    good = tmp_path / "formatter.yaml"
    good.write_text("camel_case: false\nindent: 2\n")
    bad = tmp_path / "formatter.yml"
    bad.write_text("indent: -3\n")
    unsupported = tmp_path / "formatter.ini"
    unsupported.write_text("[formatter]\n")

    assert cli(["validate-config", str(good)]) == 0
    assert cli(["validate-config", str(bad)]) == 1
    assert cli(["validate-config", str(unsupported)]) == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_cli_without_command_prints_help():
    assert cli([]) == 2
