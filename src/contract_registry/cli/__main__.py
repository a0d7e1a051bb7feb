"""CLI entry point for contract_registry.cli module.

Enables execution via: python -m contract_registry.cli CONFIG
"""

from contract_registry.cli.inspect_config import main

if __name__ == "__main__":
    raise SystemExit(main())
