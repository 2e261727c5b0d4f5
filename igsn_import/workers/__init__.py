"""Workers package for background tasks."""

from igsn_import.workers.igsn_import_worker import IgsnImportWorker

__all__ = ['IgsnImportWorker']
