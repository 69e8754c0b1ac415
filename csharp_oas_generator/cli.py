#!/usr/bin/env python3
"""Command-line interface for the C# OAS Generator."""

import argparse
import contextlib
import json
import logging
import shutil
import sys
import tempfile
import traceback
from collections.abc import Generator
from pathlib import Path
from typing import Any

import yaml

from csharp_oas_generator.config import GeneratorConfig, HttpLibrary, ModelPropertyNaming, load_config_file
from csharp_oas_generator.errors import ConfigurationError, SpecificationError
from csharp_oas_generator.frameworks import DEFAULT_FRAMEWORK, FrameworkStrategy
from csharp_oas_generator.generator.template_engine import CSharpCodeGenerator, CSharpTemplateEngine
from csharp_oas_generator.parser.oas_parser import OASParser
from csharp_oas_generator.utils.file_utils import get_relative_path, write_files_to_disk
from csharp_oas_generator.utils.string_case import snakecase

logger = logging.getLogger(__name__)

# Exit codes for better error reporting
EXIT_SUCCESS = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_INVALID_JSON = 2
EXIT_GENERATION_ERROR = 3
EXIT_CONFIGURATION_ERROR = 4

# Flags that switch a default-on option off.
_NEGATED_FLAGS = {
    "no_retry": "supports_retry",
    "no_async": "supports_async",
    "no_validatable": "validatable",
}

# Flags that switch a default-off option on.
_ENABLING_FLAGS = (
    "exclude_tests",
    "nullable_reference_types",
    "non_public_api",
    "optional_emit_default_values",
    "conditional_serialization",
    "use_oneof_discriminator_lookup",
    "case_insensitive_response_headers",
    "use_datetime_offset",
    "use_collection",
)


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        msg = f"expected KEY=VALUE, got '{text}'"
        raise argparse.ArgumentTypeError(msg)
    return key.strip(), value.strip()


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    frameworks = ", ".join(strategy.identifier for strategy in FrameworkStrategy)
    parser = argparse.ArgumentParser(
        description="Generate C# client from OpenAPI specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s spec.json
  %(prog)s spec.json --output ./client --package-name My.Client
  %(prog)s spec.yaml --target-framework "netstandard2.0;net5.0" --library httpclient
  %(prog)s spec.json --additional-property packageVersion=2.1.0 --verbose

Supported target frameworks: {frameworks}
        """,
    )
    parser.add_argument(
        "spec_file",
        type=Path,
        help="Path to OpenAPI specification file (JSON or YAML)",
        metavar="SPEC_FILE",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("./generated"),
        help="Output directory for generated files (default: %(default)s)",
        dest="output_dir",
    )
    parser.add_argument(
        "--package-name",
        "-p",
        help="C# package (root namespace) name (default: Org.OpenAPITools)",
        dest="package_name",
    )
    parser.add_argument(
        "--package-version",
        help="C# package version (default: 1.0.0)",
        dest="package_version",
    )
    parser.add_argument(
        "--template-dir",
        "-t",
        type=Path,
        help="Custom template directory, searched before the built-in templates (optional)",
        dest="template_dir",
    )
    parser.add_argument(
        "--target-framework",
        help=f"Target framework(s), separated by ';' (default: {DEFAULT_FRAMEWORK.identifier})",
        dest="target_framework",
    )
    parser.add_argument(
        "--library",
        help=f"HTTP library, one of: {', '.join(library.value for library in HttpLibrary)}",
        dest="library",
    )
    parser.add_argument(
        "--model-property-naming",
        help=f"Model property naming, one of: {', '.join(naming.value for naming in ModelPropertyNaming)}",
        dest="model_property_naming",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="JSON or YAML file with generator options",
        dest="config_file",
    )
    parser.add_argument(
        "--additional-property",
        "-a",
        type=_key_value,
        action="append",
        default=[],
        help="Generator option as KEY=VALUE; may be repeated",
        metavar="KEY=VALUE",
        dest="additional_properties",
    )
    parser.add_argument(
        "--name-mapping",
        type=_key_value,
        action="append",
        default=[],
        help="Property name override as NAME=VarName; may be repeated",
        metavar="NAME=VAR",
        dest="name_mapping",
    )
    for flag in _ENABLING_FLAGS:
        parser.add_argument(f"--{flag.replace('_', '-')}", action="store_true", default=None, dest=flag)
    for flag in _NEGATED_FLAGS:
        parser.add_argument(f"--{flag.replace('_', '-')}", action="store_true", default=None, dest=flag)
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    parsed_args = parser.parse_args(args)

    # Validate spec file exists
    if not parsed_args.spec_file.exists():
        parser.error(f"Specification file not found: {parsed_args.spec_file}")

    return parsed_args


def collect_options(parsed_args: argparse.Namespace) -> dict[str, Any]:
    """Merge generator options from the config file, KEY=VALUE pairs and flags, in that order."""
    options: dict[str, Any] = {}
    if parsed_args.config_file is not None:
        for key, value in load_config_file(parsed_args.config_file).items():
            options[snakecase(key)] = value

    for key, value in parsed_args.additional_properties:
        options[snakecase(key)] = value

    if parsed_args.name_mapping:
        name_mapping = dict(options.get("name_mapping") or {})
        name_mapping.update(dict(parsed_args.name_mapping))
        options["name_mapping"] = name_mapping

    for name in ("package_name", "package_version", "target_framework", "library", "model_property_naming"):
        value = getattr(parsed_args, name)
        if value is not None:
            options[name] = value

    for flag in _ENABLING_FLAGS:
        if getattr(parsed_args, flag):
            options[flag] = True
    for flag, option in _NEGATED_FLAGS.items():
        if getattr(parsed_args, flag):
            options[option] = False

    return options


def print_verbose_info(*, operation_count: int, model_count: int) -> None:
    """Print verbose information about parsed specification."""
    print(f"Parsed {operation_count} operations")
    print(f"Found {model_count} models")


def print_generation_summary(*, file_count: int, files: dict[Path, str], output_dir: Path) -> None:
    """Print summary of generated files."""
    print(f"Generated {file_count} files:")
    for file_path in sorted(files.keys()):
        print(f"  {get_relative_path(file_path, output_dir)}")
    print(f"\nC# client generated successfully in {output_dir}")


@contextlib.contextmanager
def backup_and_clean_output_dir(output_dir: Path) -> Generator[None, None, None]:
    """A context manager to backup and clean the output directory."""
    backup_dir = None
    if output_dir.exists() and any(output_dir.iterdir()):
        backup_dir = Path(tempfile.mkdtemp())
        shutil.copytree(output_dir, backup_dir, dirs_exist_ok=True)

    # Clean output directory before generation
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        yield
    except Exception:
        if backup_dir:
            print(
                "Error: Generation failed. Restoring original content.",
                file=sys.stderr,
            )
            if output_dir.exists():
                shutil.rmtree(output_dir)
            shutil.copytree(backup_dir, output_dir, dirs_exist_ok=True)
        raise
    finally:
        if backup_dir:
            shutil.rmtree(backup_dir)


def generate_csharp_client_from_spec(
    *,
    spec_file: Path,
    output_dir: Path,
    config: GeneratorConfig,
    template_dir: Path | None = None,
    verbose: bool = False,
) -> dict[Path, str]:
    """Generate C# client from OpenAPI specification file."""
    # Parse OpenAPI specification
    parser = OASParser(config)
    parsed_spec = parser.parse_file(spec_file)

    if verbose:
        print_verbose_info(
            operation_count=len(parsed_spec.operations),
            model_count=len(parsed_spec.models),
        )

    # Generate C# client files
    engine = CSharpTemplateEngine(template_dir=template_dir, library=config.library)
    generator = CSharpCodeGenerator(config, template_engine=engine)
    return generator.generate_client(parsed_spec, output_dir)


def main(args: list[str] | None = None) -> int:
    """Generate C# client from OpenAPI specification."""
    parsed_args = parse_command_line_args(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Options are validated before the output directory is touched.
    try:
        options = collect_options(parsed_args)
        logger.debug("generator options: %s", options)
        config = GeneratorConfig.from_options(options)
    except (ConfigurationError, OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR

    try:
        with backup_and_clean_output_dir(parsed_args.output_dir):
            generated_files = generate_csharp_client_from_spec(
                spec_file=parsed_args.spec_file,
                output_dir=parsed_args.output_dir,
                config=config,
                template_dir=parsed_args.template_dir,
                verbose=parsed_args.verbose,
            )

            # Write files to disk
            write_files_to_disk(generated_files)

            if parsed_args.verbose:
                print_generation_summary(
                    file_count=len(generated_files),
                    files=generated_files,
                    output_dir=parsed_args.output_dir,
                )
            else:
                print(f"C# client generated successfully in {parsed_args.output_dir}")

        return EXIT_SUCCESS

    except FileNotFoundError:
        print(f"Error: Specification file not found: {parsed_args.spec_file}", file=sys.stderr)
        return EXIT_FILE_NOT_FOUND
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in specification file: {e}", file=sys.stderr)
        return EXIT_INVALID_JSON
    except (yaml.YAMLError, SpecificationError) as e:
        print(f"Error: Invalid specification file: {e}", file=sys.stderr)
        return EXIT_INVALID_JSON
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
