"""
Package entry point.

This allows running:
  - python -m skills_hub            -> starts the stdio MCP server
  - python -m skills_hub list       -> any other CLI command

The entry point delegates to skills_hub.cli.cli_main().
"""

from skills_hub.cli import cli_main


def main() -> None:
    cli_main()


if __name__ == "__main__":
    main()
