"""
Reporting Module (``pos_modules.reporting``).

Sales, cost and profit reports assembled from the other modules.
"""

from pos_modules.reporting.service import ReportingService

__all__ = ["ReportingService"]
