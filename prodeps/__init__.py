"""prodeps — production dependency closure for pnpm workspaces."""

__version__ = "0.1.0"
