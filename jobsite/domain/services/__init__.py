"""
Domain Services - Registration, staffing and reporting across projects.
"""

from .portfolio_service import PortfolioService

__all__ = [
    'PortfolioService',
]
