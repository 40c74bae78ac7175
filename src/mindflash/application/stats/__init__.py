# Application Stats Package
from .calculator import StatsCalculator
from .service import StatsService

__all__ = ["StatsCalculator", "StatsService"]
