"""
Main Application

Orchestrates the generation pipeline: validate options, scan annotations,
aggregate rules, build resources, render and write the manifests.
"""

import argparse
import logging
import os
import sys
from typing import Callable, List, NamedTuple, Optional, Sequence

from .annotations import parse_dir
from .core import ConfigManager, GenerationOptions, get_env_defaults, resolve_options
from .core import setup_logging, parse_label_args
from .core.constants import ErrorMessages, FileConstants, GeneratorConstants, KubernetesConstants
from .core.exceptions import ManifestWriteError, RBACGeneratorError
from .generate import (
    FILE_EXTENSION,
    PermissionRule,
    aggregate,
    build_role,
    build_role_binding,
    render,
    validate_rules
)

logger = logging.getLogger(__name__)

RuleSource = Callable[[str], Sequence[PermissionRule]]


class GenerationResult(NamedTuple):
    """Outcome of a generation run"""
    rule_count: int
    written_files: List[str]


class RBACGenerator:
    """Main application orchestrator for the RBAC Generator tool"""

    def __init__(self, rule_source: Optional[RuleSource] = None):
        """
        Initialize RBAC Generator with dependency injection

        Args:
            rule_source: Callable returning the rules found under a directory
                (defaults to the annotation parser)
        """
        self.rule_source = rule_source or parse_dir

    def generate(self, options: GenerationOptions) -> GenerationResult:
        """
        Run the full pipeline for one set of options

        Nothing is written unless scanning, aggregation, building and
        rendering all succeed. No files are written when no rules are found.

        Args:
            options: Generation options

        Returns:
            GenerationResult with the aggregated rule count and written paths

        Raises:
            ConfigurationError: If the options are invalid
            ScanError: If the source tree cannot be scanned
            SerializationError: If a manifest cannot be rendered
            ManifestWriteError: If a manifest cannot be written
        """
        options.validate()

        raw_rules = self.rule_source(options.input_dir)
        validate_rules(raw_rules)
        rules = aggregate(raw_rules)

        if not rules:
            logger.info(f"No RBAC rules found under {options.input_dir}, nothing to generate")
            return GenerationResult(rule_count=0, written_files=[])

        role = build_role(rules, options)
        role_binding = build_role_binding(options)

        role_manifest = render(role)
        role_binding_manifest = render(role_binding)

        role_file = self.manifest_path(options.output_dir, FileConstants.ROLE_MANIFEST_BASENAME)
        role_binding_file = self.manifest_path(options.output_dir, FileConstants.ROLE_BINDING_MANIFEST_BASENAME)

        self._write_manifest(role_file, role_manifest, KubernetesConstants.ResourceKind.CLUSTER_ROLE)
        self._write_manifest(role_binding_file, role_binding_manifest,
                             KubernetesConstants.ResourceKind.CLUSTER_ROLE_BINDING)

        return GenerationResult(rule_count=len(rules), written_files=[role_file, role_binding_file])

    @staticmethod
    def manifest_path(output_dir: str, basename: str) -> str:
        """Return the manifest file path for a base name"""
        return os.path.join(output_dir, f"{basename}{FILE_EXTENSION}")

    def _write_manifest(self, path: str, content: bytes, kind: str) -> None:
        # open() creates files with mode 0o666 masked by the process umask
        try:
            with open(path, 'wb') as f:
                f.write(content)
        except OSError as e:
            raise ManifestWriteError(
                ErrorMessages.WriteError.WRITE_FAILED.format(kind=kind, path=path, reason=e),
                path=path
            ) from e
        logger.info(f"{kind} manifest saved to: {path}")


def create_rbac_generator(rule_source: Optional[RuleSource] = None) -> RBACGenerator:
    """
    Factory function to create RBACGenerator with default dependencies

    Args:
        rule_source: Optional replacement for the annotation parser

    Returns:
        RBACGenerator: Configured RBACGenerator instance
    """
    return RBACGenerator(rule_source=rule_source)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser with the generate subcommand"""

    # Common parser: arguments shared by all commands
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument('--debug', action='store_true', default=None, help='Enable debug logging')
    common_parser.add_argument('--config', help='Configuration file path')

    parser = argparse.ArgumentParser(
        prog='rbac-generator',
        description='RBAC Generator - Generate RBAC manifests from RBAC annotations in source files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rbac-generator generate
  rbac-generator generate --name manager --input-dir ./pkg --output-dir ./config
  rbac-generator generate --label app.kubernetes.io/name=my-operator --config rbac.yaml
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    generate_parser = subparsers.add_parser(
        'generate',
        parents=[common_parser],
        help='Generate RBAC manifests',
        description='Generate ClusterRole and ClusterRoleBinding manifests from RBAC annotations'
    )
    # Defaults are applied after merging the config file and environment
    generate_parser.add_argument(
        '--name',
        help=f"Name to be used as prefix in identifier for manifests (default: {GeneratorConstants.DEFAULT_NAME})"
    )
    generate_parser.add_argument(
        '--input-dir',
        help=f"Input directory pointing to annotated source files (default: {GeneratorConstants.DEFAULT_INPUT_DIR})"
    )
    generate_parser.add_argument(
        '--output-dir',
        help=f"Output directory where generated manifests will be saved (default: {GeneratorConstants.DEFAULT_OUTPUT_DIR})"
    )
    generate_parser.add_argument(
        '--label', action='append', metavar='KEY=VALUE',
        help='Label added to both manifests (repeatable)'
    )

    return parser


def handle_generate_command(args, rbac_generator: RBACGenerator) -> int:
    """Handle generate command execution."""
    config_manager = None
    if args.config:
        config_manager = ConfigManager()
        config_manager.load_config(args.config)

    debug = args.debug
    if debug is None and config_manager:
        debug = config_manager.get_value('global.debug')
    if debug is None:
        debug = get_env_defaults()['debug']
    setup_logging(bool(debug))

    options = resolve_options(
        name=args.name,
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        labels=parse_label_args(args.label),
        config_manager=config_manager
    )
    logger.debug(f"Resolved options: {options}")

    rbac_generator.generate(options)
    print(f"RBAC manifests generated under '{options.output_dir}' directory")
    return 0


# Command dispatcher mapping
COMMAND_HANDLERS = {
    'generate': handle_generate_command,
}


def main(argv: Optional[List[str]] = None, rbac_generator: Optional[RBACGenerator] = None) -> int:
    """
    Main entry point

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        rbac_generator: Generator to run (defaults to one using the annotation parser)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    handler = COMMAND_HANDLERS.get(args.command)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1

    try:
        return handler(args, rbac_generator or create_rbac_generator())
    except RBACGeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
