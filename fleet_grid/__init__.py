"""
fleet-grid: generic tabular data engine and bulk-import pipeline for Django
admin screens.

Public API:
    fleet_grid.table      TableViewEngine, ColumnDescriptor, ColumnLayoutStore
    fleet_grid.importing  ImportValidationPipeline, ImportCommitExecutor, ImportSession
"""

from .defaults import LIBRARY_VERSION

__version__ = LIBRARY_VERSION
