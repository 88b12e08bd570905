"""Language adapters — node package managers."""

from prodeps.adapters.languages.pnpm import PnpmAdapter

__all__ = ["PnpmAdapter"]
