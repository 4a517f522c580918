"""
Report generation for RepoKeeper.
"""

from .generator import MaintenanceReport, ReportAggregator, ReportFormat, ReportGenerator

__all__ = ['MaintenanceReport', 'ReportAggregator', 'ReportFormat', 'ReportGenerator']
