"""
Playtime Guard CLI

Unified command-line interface for Playtime Guard.
"""

from .main import cli

__all__ = ["cli", "main"]


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
