"""Main markdown exporter orchestrating the export of vault notes."""

import logging
import posixpath
import sys
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from logger import ProgressTracker
from models import Document, DocumentExportResult, ExportParams, ExportSettings, ExportStatus
from vault import AlreadyExistsError, BaseVault, VaultError
from .attachment_manager import AttachmentManager
from .content_rewriter import ContentRewriter
from .document_walker import DocumentWalker
from .path_synthesizer import join_link_path


class MarkdownExporter:
    """
    Orchestrates export of vault notes to a portable markdown tree.

    This exporter:
    1. Reads each note from the vault
    2. Rewrites its content (images, wiki links, embeds)
    3. Copies the referenced images into the attachment folder
    4. Writes the rewritten note below the output directory
    5. Isolates failures per note so a batch keeps going
    """

    def __init__(
        self,
        vault: BaseVault,
        settings: ExportSettings,
        logger: Optional[logging.Logger] = None,
        show_progress: bool = True
    ):
        """
        Initialize the markdown exporter.

        Args:
            vault: Vault to read notes from and write the export into
            settings: Frozen export settings
            logger: Logger instance
            show_progress: Show a progress bar on interactive terminals
        """
        self.vault = vault
        self.settings = settings
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.markdown_exporter')
        self.show_progress = show_progress

        # Initialize helper components
        self.content_rewriter = ContentRewriter(vault, settings, logger=self.logger)
        self.attachment_manager = AttachmentManager(vault, settings, logger=self.logger)
        excluded = [settings.output] if settings.rel_attach_path else [settings.output, settings.attachment]
        self.document_walker = DocumentWalker(vault, excluded_paths=excluded, logger=self.logger)

        # Initialize statistics
        self.stats = {
            'total_documents': 0,
            'documents_exported': 0,
            'documents_skipped': 0,
            'documents_failed': 0
        }

        self.logger.info(f"MarkdownExporter initialized (output: {settings.output})")

    def output_path(self, document: Document, output_sub_path: str = '.') -> str:
        """
        Path the exported note is written to.

        Args:
            document: Document being exported
            output_sub_path: Document folder relative to the output root

        Returns:
            Output file path
        """
        settings = self.settings
        nest_by_document = bool(settings.custom_file_name) or (
            settings.include_file_name and settings.rel_attach_path
        )
        out_dir = join_link_path(
            settings.output,
            document.stem if nest_by_document else '',
            output_sub_path
        )
        filename = f"{settings.custom_file_name}.md" if settings.custom_file_name else document.name
        return join_link_path(out_dir, filename)

    def export_document(self, params: ExportParams) -> DocumentExportResult:
        """
        Export a single note.

        Args:
            params: Document and its output sub path

        Returns:
            DocumentExportResult with status EXPORTED or SKIPPED

        Raises:
            NotFoundError: If the note does not exist
            IOFailureError: If reading, rewriting or writing fails
        """
        document = params.document
        self.logger.debug(f"Exporting '{document.path}' (sub path: {params.output_sub_path})")

        content = self.vault.read_text(document.path)
        rewritten = self.content_rewriter.rewrite(document, content, params.output_sub_path)
        asset_stats = self.attachment_manager.copy_assets(document, content)

        target_file = self.output_path(document, params.output_sub_path)
        try:
            self.vault.ensure_directory(posixpath.dirname(target_file) or '.')
        except AlreadyExistsError:
            self.logger.debug(f"Output folder for '{target_file}' already exists")

        try:
            self.vault.write_text(target_file, rewritten, override=self.settings.override_existing)
        except AlreadyExistsError:
            self.logger.info(f"'{target_file}' already exists and overriding is off - skipping")
            return DocumentExportResult(
                document=document,
                status=ExportStatus.SKIPPED,
                output_path=target_file,
                asset_stats=asset_stats
            )

        self.logger.debug(f"Wrote {len(rewritten)} characters to {target_file}")
        return DocumentExportResult(
            document=document,
            status=ExportStatus.EXPORTED,
            output_path=target_file,
            asset_stats=asset_stats
        )

    def export_documents(self, params_list: Iterable[ExportParams]) -> List[DocumentExportResult]:
        """
        Export a batch of notes, one at a time.

        A failing note is logged and reported; the remaining notes are still
        exported.

        Args:
            params_list: Export parameters to process

        Returns:
            One DocumentExportResult per note
        """
        params_list = list(params_list)
        results = []

        with ProgressTracker(total_items=len(params_list), item_type='documents') as tracker:
            for params in tqdm(
                params_list,
                desc="Exporting notes",
                unit="note",
                leave=False,
                disable=not self._should_show_progress()
            ):
                result = self._export_isolated(params)
                results.append(result)
                tracker.increment(success=result.succeeded)

        self.logger.info(
            f"Export complete: {self.stats['documents_exported']} exported, "
            f"{self.stats['documents_skipped']} skipped, {self.stats['documents_failed']} failed"
        )
        return results

    def export_path(self, path: str) -> List[DocumentExportResult]:
        """Export a vault note or every note below a vault folder."""
        self.logger.info(f"Exporting '{path}' to {self.settings.output}")
        return self.export_documents(self.document_walker.iter_export_params(path))

    def plan(self, params_list: Iterable[ExportParams]) -> List[Tuple[str, str]]:
        """
        List where each note would be written, without touching the vault.

        Returns:
            List of (source_path, output_path) tuples
        """
        return [
            (params.document.path, self.output_path(params.document, params.output_sub_path))
            for params in params_list
        ]

    def _export_isolated(self, params: ExportParams) -> DocumentExportResult:
        self.stats['total_documents'] += 1
        try:
            result = self.export_document(params)
        except VaultError as e:
            self.logger.error(f"Failed to export '{params.document.path}': {e}")
            result = self._failed_result(params, str(e))
        except Exception as e:
            self.logger.error(f"Unexpected error exporting '{params.document.path}': {e}", exc_info=True)
            result = self._failed_result(params, str(e))

        if result.status == ExportStatus.EXPORTED:
            self.stats['documents_exported'] += 1
        elif result.status == ExportStatus.SKIPPED:
            self.stats['documents_skipped'] += 1
        return result

    def _failed_result(self, params: ExportParams, message: str) -> DocumentExportResult:
        self.stats['documents_failed'] += 1
        return DocumentExportResult(
            document=params.document,
            status=ExportStatus.FAILED,
            error_message=message
        )

    def _should_show_progress(self) -> bool:
        """Check if progress bars should be displayed."""
        return self.show_progress and sys.stdout.isatty()

    def get_stats(self) -> Dict[str, Any]:
        """Get export statistics including attachment counts."""
        stats: Dict[str, Any] = dict(self.stats)
        stats['attachments'] = self.attachment_manager.get_stats()
        return stats
