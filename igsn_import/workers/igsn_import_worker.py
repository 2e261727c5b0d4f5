"""Worker for parsing IGSN CSV content outside the GUI thread."""

import logging

from PySide6.QtCore import QObject, Signal

from igsn_import.models import ImportBatch
from igsn_import.utils.igsn_csv_parser import IgsnCsvParser


logger = logging.getLogger(__name__)


class IgsnImportWorker(QObject):
    """Worker for parsing an IGSN CSV file in a separate thread."""

    # Signals
    progress_update = Signal(int, int, str)  # current, total, message
    finished = Signal(object)  # ImportBatch
    error_occurred = Signal(str)  # error_message

    def __init__(self, csv_text: str, source_name: str = ""):
        """
        Initialize the worker.

        Args:
            csv_text: Content of the CSV file (already read by the caller)
            source_name: File name shown in progress messages
        """
        super().__init__()
        self.csv_text = csv_text
        self.source_name = source_name
        self._is_running = False
        self._stop_requested = False

    def run(self):
        """
        Execute the parsing.

        Emits finished with the ImportBatch. If the file was rejected, the
        batch errors are emitted via error_occurred first. Emits neither when
        stopped.
        """
        self._is_running = True
        label = self.source_name or "CSV-Datei"

        try:
            logger.info(f"Parsing IGSN CSV: {label}")
            self.progress_update.emit(0, 0, f"{label} wird gelesen...")

            batch = IgsnCsvParser.parse(
                self.csv_text,
                progress_callback=self._on_progress,
                should_stop=lambda: self._stop_requested
            )

            if self._stop_requested:
                logger.info("IGSN import stopped by user")
                self.error_occurred.emit("Import wurde abgebrochen.")
                return

            if batch.has_errors:
                for error in batch.errors:
                    self.error_occurred.emit(error.message)
            else:
                self.progress_update.emit(
                    batch.row_count,
                    batch.row_count,
                    self._summary(batch)
                )

            self.finished.emit(batch)

        except Exception as e:
            logger.exception("Unexpected error in IGSN import worker")
            self.error_occurred.emit(f"Unerwarteter Fehler ({type(e).__name__}): {str(e)}")
        finally:
            self._is_running = False

    @staticmethod
    def _summary(batch: ImportBatch) -> str:
        message = f"[OK] {batch.row_count} IGSN-Zeilen gelesen"
        if batch.warnings:
            message += f" ({len(batch.warnings)} Warnungen)"
        return message

    def _on_progress(self, current: int, total: int):
        """Forward parser progress."""
        self.progress_update.emit(current, total, f"Zeile {current + 1} von {total + 1}")

    def stop(self):
        """Request graceful stop of the operation."""
        self._stop_requested = True
        logger.info("IGSN import worker stop requested")

    @property
    def is_running(self) -> bool:
        return self._is_running
