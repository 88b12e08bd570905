"""Allow ``python -m prodeps``."""

from prodeps.main import cli

cli()
