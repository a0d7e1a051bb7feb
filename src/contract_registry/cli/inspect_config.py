"""CLI command for checking a registry configuration file.

The file is replayed into a ContractRegistry, so every registry invariant is
enforced (duplicate keys, unknown ABI keys, global/network collisions). On
success the resulting registry snapshot is printed as JSON.

Usage:
    python -m contract_registry.cli.inspect_config CONFIG [OPTIONS]

Examples:
    # Check a configuration and print the snapshot
    python -m contract_registry.cli.inspect_config registry.json

    # Without the ERC20/ERC721/ERC1155 defaults
    python -m contract_registry.cli.inspect_config registry.json --without-default-abis

    # Verbose logging
    python -m contract_registry.cli.inspect_config registry.json -v
"""

import json
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Optional, Sequence

import structlog
from pydantic import ValidationError

from contract_registry.core.config import Settings, configure_logging
from contract_registry.registry.multi_network import ContractRegistry
from contract_registry.services.exceptions import RegistryError

logger = structlog.get_logger()


def parse_args(argv: Optional[Sequence[str]] = None) -> Namespace:
    """Parse command-line arguments."""
    parser = ArgumentParser(
        description="Check a contract registry configuration file",
        epilog="Prints the registry snapshot as JSON when the configuration is valid",
    )

    parser.add_argument(
        "config",
        type=Path,
        help="Path to a JSON file with 'global_abis' and 'networks'",
    )

    parser.add_argument(
        "--without-default-abis",
        action="store_true",
        default=None,
        help="Do not seed the ERC20/ERC721/ERC1155 global ABIs",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation of the printed snapshot (default: 2)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code: 0 (valid configuration), 1 (error)
    """
    args = parse_args(argv)

    settings = Settings()  # type: ignore[call-arg]
    if args.verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)

    without_default_abis = (
        args.without_default_abis
        if args.without_default_abis is not None
        else settings.without_default_abis
    )

    logger.info(
        "cli.started",
        config=str(args.config),
        without_default_abis=without_default_abis,
    )

    try:
        raw_config = json.loads(args.config.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.error("cli.config_unreadable", config=str(args.config), error=str(e))
        print(f"Error: Cannot read {args.config}: {e}", file=sys.stderr)
        return 1

    try:
        registry = ContractRegistry(raw_config, without_default_abis=without_default_abis)
    except ValidationError as e:
        logger.warning("cli.config_invalid", error_count=e.error_count())
        print(f"Error: Invalid configuration:\n{e}", file=sys.stderr)
        return 1
    except (RegistryError, ValueError) as e:
        logger.warning("cli.registry_error", error=str(e), error_type=type(e).__name__)
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(json.dumps(registry.to_object(), indent=args.indent))

    logger.info("cli.completed", chain_ids=registry.get_chain_ids())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
