"""
mirrorgate — CLI Entry Point

Usage:
    mirrorgate mirror push <slave> <repo>
    mirrorgate mirror status <slave|all> <repo> [--json]
    mirrorgate mirror list master|slaves <repo>
"""

from __future__ import annotations

# Load .env file FIRST, before any other imports that might read env vars
from pathlib import Path
from dotenv import load_dotenv

# Find .env in project root
_project_root = Path(__file__).parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import click

from .logging_config import setup_logging
from .cli.mirror import mirror

# Initialize logging
setup_logging()


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """mirrorgate — Replicate repositories to slave hosts."""
    ctx.ensure_object(dict)


# Mirror commands — see mirrorgate/cli/mirror.py
cli.add_command(mirror)


if __name__ == "__main__":
    cli()
