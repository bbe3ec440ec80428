"""Attachment manager copying the images a note references into the export tree."""

import logging
from typing import Dict, Optional

from models import Document, ExportSettings
from vault import AlreadyExistsError, BaseVault, IOFailureError, NotFoundError
from .link_scanner import LinkScanner, is_remote_link
from .path_synthesizer import PathSynthesizer
from .target_resolver import TargetResolver


class AttachmentManager:
    """
    Copies the local images of exported notes to their synthesized destinations.

    This manager:
    1. Finds image links in the original note text
    2. Creates the note's attachment directory
    3. Resolves each local image to its vault file
    4. Copies it to the synthesized destination unless already present
    5. Tracks statistics across all processed notes
    """

    def __init__(
        self,
        vault: BaseVault,
        settings: ExportSettings,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the attachment manager.

        Args:
            vault: Vault to copy from and into
            settings: Frozen export settings
            logger: Logger instance
        """
        self.vault = vault
        self.settings = settings
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.attachment_manager')

        self.scanner = LinkScanner(settings.image_extensions, logger=self.logger)
        self.resolver = TargetResolver(vault, logger=self.logger)
        self.synthesizer = PathSynthesizer(settings, logger=self.logger)

        # Initialize statistics
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'total_assets': 0,
            'copied': 0,
            'deduplicated': 0,
            'remote_skipped': 0,
            'failed': 0
        }

    def copy_assets(self, document: Document, raw_content: str) -> Dict[str, int]:
        """
        Copy every local image referenced by a document.

        Per-asset failures are logged and counted, never raised.

        Args:
            document: Document being exported
            raw_content: Original document text

        Returns:
            Per-document statistics dictionary

        Raises:
            IOFailureError: If the attachment directory cannot be created
        """
        page_stats = self._empty_stats()

        image_links = self.scanner.image_links(raw_content)
        if not image_links:
            return page_stats

        attachment_dir = self.synthesizer.attachment_directory(document.name)
        try:
            self.vault.ensure_directory(attachment_dir)
        except AlreadyExistsError:
            self.logger.debug(f"Attachment folder '{attachment_dir}' already exists")

        self.logger.debug(f"Processing {len(image_links)} image link(s) for '{document.path}'")

        for occurrence in image_links:
            page_stats['total_assets'] += 1

            if is_remote_link(occurrence.target):
                page_stats['remote_skipped'] += 1
                continue

            target = self.resolver.resolve(occurrence.link_text, document.path)
            reference = self.synthesizer.synthesize(target.name, document.name)

            try:
                self.vault.copy_asset(target.path, reference.destination)
                page_stats['copied'] += 1
                self.logger.debug(f"Copied '{target.path}' -> {reference.destination}")
            except AlreadyExistsError:
                page_stats['deduplicated'] += 1
                self.logger.debug(f"Asset '{reference.destination}' already present")
            except (NotFoundError, IOFailureError) as e:
                page_stats['failed'] += 1
                self.logger.error(
                    f"Failed to copy file from {target.path} to {reference.destination}: {e}"
                )

        for key, value in page_stats.items():
            self.stats[key] += value

        return page_stats

    def get_stats(self) -> Dict[str, int]:
        """Get attachment processing statistics."""
        return self.stats.copy()
