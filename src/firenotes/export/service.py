"""Export delivery: write the rendered note, then hand it to a share target."""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from firenotes.core.config import EXPORT_DIR
from firenotes.core.errors import ExportError
from firenotes.core.notify import LoggingNotifier, Notifier
from firenotes.core.types import Note
from firenotes.export.render import ExportFormat, export_filename, render_note

logger = logging.getLogger(__name__)


class ShareTarget(Protocol):
    """Capability that hands an exported file to the platform share sheet."""

    async def is_available(self) -> bool:
        pass

    async def share(self, path: Path, mime_type: str, dialog_title: str) -> None:
        pass


class ExportService:
    """Render notes to files in the scoped export directory."""

    def __init__(
        self,
        export_dir: Path | str | None = None,
        share_target: ShareTarget | None = None,
        notifier: Notifier | None = None,
    ):
        """
        Initialize export service.

        Args:
            export_dir: Directory exports are written to (defaults to EXPORT_DIR)
            share_target: Optional sharing capability
            notifier: Receives completion notices when sharing is unavailable
        """
        self.export_dir = Path(export_dir) if export_dir else EXPORT_DIR
        self.share_target = share_target
        self.notifier: Notifier = notifier or LoggingNotifier()

    @staticmethod
    def formats() -> list[dict[str, str]]:
        """List available export formats for pickers."""
        return [
            {"key": fmt.value, "label": fmt.label, "description": fmt.description}
            for fmt in ExportFormat
        ]

    def write(self, note: Note, fmt: ExportFormat) -> Path:
        """
        Render ``note`` and write it to the export directory.

        Returns:
            Path of the written file

        Raises:
            ExportError: If the file cannot be written
        """
        content = render_note(note, fmt)
        path = self.export_dir / export_filename(note.title, fmt)
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write export %s", path, exc_info=True)
            raise ExportError(
                f"Failed to export note as {fmt.label}. Please try again.",
                detail=str(exc),
            ) from exc

        logger.info("Exported note %s to %s", note.id, path)
        return path

    async def export_note(
        self, note: Note, fmt: ExportFormat | str = ExportFormat.TEXT
    ) -> Path:
        """
        Export a note and deliver it.

        Args:
            note: Note to export
            fmt: ExportFormat or its key ("txt", "md", "html")

        Returns:
            Path of the written file

        Raises:
            ExportError: On unknown format, write failure or share failure
        """
        if not isinstance(fmt, ExportFormat):
            try:
                fmt = ExportFormat(fmt)
            except ValueError as exc:
                raise ExportError(f"Unsupported export format: {fmt}") from exc

        # Rendering and disk IO run off the event loop
        path = await asyncio.to_thread(self.write, note, fmt)

        try:
            if self.share_target is not None and await self.share_target.is_available():
                await self.share_target.share(
                    path,
                    mime_type=fmt.mime_type,
                    dialog_title=f"Export: {note.title} as {fmt.label}",
                )
                return path
        except Exception as exc:
            logger.error("Failed to share export %s", path, exc_info=True)
            raise ExportError(
                "Failed to share exported note. Please try again.",
                detail=str(exc),
            ) from exc

        self.notifier.notify(
            "Export Complete", f"Note exported as {fmt.label}: {path.name}"
        )
        return path
