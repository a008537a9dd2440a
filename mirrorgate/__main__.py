"""
Run the CLI directly.

Usage:
    python -m mirrorgate mirror push backup1 foo
"""

from .main import cli

if __name__ == "__main__":
    cli()
