"""Demo data generators."""

from zaldo.generators.portfolio import PortfolioGenerator

__all__ = ["PortfolioGenerator"]
