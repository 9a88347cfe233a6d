"""Entry point for `python -m ruleforge`."""

from ruleforge.cli.main import cli

if __name__ == "__main__":
    cli()
