"""
Command-line interface for emberwrap.

Developer tooling to check how the formatter treats a type before wiring it
into an API, and to validate formatter configuration files.

Usage:
    emberwrap inspect myapp.models:Customer
    emberwrap inspect "myapp.models:Customer" --collection
    emberwrap validate-config /path/to/formatter.yaml
"""

import argparse
import importlib
import json
import sys
from typing import Any, Dict, List, Optional

from emberwrap.classification.shapes import element_shape, type_name
from emberwrap.core.exceptions import ConfigurationError
from emberwrap.core.logger import get_logger
from emberwrap.formatter import EmberJsonFormatter
from emberwrap.models.formatter_config import FormatterConfig
from emberwrap.shaping.pluralizers import EnglishPluralizer

logger = get_logger(__name__)


def resolve_type(type_path: str) -> Any:
    """Import ``module:Qualname`` (or ``module.Qualname``) and return the object."""
    if ":" in type_path:
        module_name, _, qualname = type_path.partition(":")
    else:
        module_name, _, qualname = type_path.rpartition(".")
    if not module_name or not qualname:
        raise ValueError(f"Expected 'module:Qualname', got {type_path!r}")

    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


def inspect_type(
    type_path: str,
    *,
    collection: bool = False,
    config: Optional[FormatterConfig] = None,
) -> Dict[str, Any]:
    """
    Report how the formatter would treat a type.

    Args:
        type_path: Importable ``module:Qualname`` of the type
        collection: Inspect ``list[Type]`` instead of ``Type``
        config: Formatter conventions (root key casing, meta key)

    Returns:
        Report with the envelope verdict and the root key it would use

    Example:
        >>> inspect_type("decimal:Decimal")
        {'type': 'Decimal', 'shouldEnvelope': False, ...}
    """
    tp = resolve_type(type_path)
    name = type_name(tp)
    if collection:
        tp = list[tp]  # type: ignore[valid-type]
        name = f"list[{name}]"

    formatter = EmberJsonFormatter(EnglishPluralizer(), config=config)
    verdict = formatter.should_envelope(tp)
    report: Dict[str, Any] = {
        "type": name,
        "shouldEnvelope": verdict,
        "elementShape": type_name(element_shape(tp)),
        "rootKey": None,
        "sideload": False,
    }
    if verdict:
        context = formatter.shaper.context_for(tp)
        report["rootKey"] = context.root_key
        report["sideload"] = context.sideload
    return report


def validate_config(config_path: str) -> bool:
    """
    Validate a formatter configuration file (.json/.yaml).

    Returns:
        True if configuration is valid

    Raises:
        ConfigurationError: If the file is missing or has an unsupported format
        pydantic.ValidationError: If the content does not match FormatterConfig
    """
    try:
        FormatterConfig.from_file(config_path)
        logger.info(f"Configuration is valid: {config_path}")
        return True
    except Exception as e:
        logger.error(f"Config validation failed: {str(e)}")
        raise


def cli(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for emberwrap.

    Supports subcommands:
    - inspect: Classify a type and show its envelope root key
    - validate-config: Validate a formatter configuration
    """
    parser = argparse.ArgumentParser(
        prog="emberwrap",
        description="Ember Data envelope formatter tooling",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    inspect_parser = subparsers.add_parser("inspect", help="Classify a type")
    inspect_parser.add_argument("type_path", help="Importable type, e.g. myapp.models:Customer")
    inspect_parser.add_argument("--collection", action="store_true", help="Inspect list[Type]")
    inspect_parser.add_argument("--config", help="Formatter configuration file (.json/.yaml)")

    validate_parser = subparsers.add_parser("validate-config", help="Validate a configuration file")
    validate_parser.add_argument("config", help="Path to configuration file")

    args = parser.parse_args(argv)

    if args.command == "inspect":
        config = FormatterConfig.from_file(args.config) if args.config else None
        try:
            report = inspect_type(args.type_path, collection=args.collection, config=config)
        except (ImportError, AttributeError, ValueError) as e:
            print(f"Cannot inspect {args.type_path}: {e}", file=sys.stderr)
            return 1
        print(json.dumps(report, indent=2))
        return 0

    if args.command == "validate-config":
        try:
            validate_config(args.config)
        except (ConfigurationError, ValueError) as e:
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 1
        print("Configuration is valid")
        return 0

    parser.print_help()
    return 2


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
