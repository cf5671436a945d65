"""ZALDO ledger: profit split and cash-flow engine for investor-funded loans."""

__version__ = "0.1.0"
