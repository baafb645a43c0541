"""Entry point delegating to the glue pipeline CLI."""

from dtsp_randomized.glue.pipeline import cli

if __name__ == "__main__":
    cli()
