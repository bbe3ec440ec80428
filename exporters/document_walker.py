"""Document walker turning an exported file or folder into export parameters."""

import logging
import posixpath
from typing import Iterable, Iterator, Optional

from models import Document, ExportParams
from vault import BaseVault, NotFoundError

MARKDOWN_EXTENSION = '.md'


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace('\\', '/'))


class DocumentWalker:
    """
    Walks a vault file or folder and yields one ExportParams per note.

    A single file is exported at the output root. For a folder, each note is
    paired with its folder relative to the exported folder, so the output tree
    mirrors the vault tree below it.
    """

    def __init__(
        self,
        vault: BaseVault,
        excluded_paths: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the document walker.

        Args:
            vault: Vault to walk
            excluded_paths: Folders never descended into, such as the export output
            logger: Logger instance
        """
        self.vault = vault
        self.excluded_paths = frozenset(_normalize(p) for p in (excluded_paths or []) if p)
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.document_walker')

    def iter_export_params(self, path: str) -> Iterator[ExportParams]:
        """
        Yield export parameters for a file or every note under a folder.

        Args:
            path: Vault path of a note or folder

        Yields:
            ExportParams in sorted path order

        Raises:
            NotFoundError: If the path does not exist
        """
        if not self.vault.exists(path):
            raise NotFoundError(f"Nothing to export at '{path}'", path=path)

        if not self.vault.is_directory(path):
            yield ExportParams(document=Document.from_path(path), output_sub_path='.')
            return

        self.logger.debug(f"Walking folder '{path}'")
        yield from self._walk_folder(path, '')

    def _walk_folder(self, folder: str, parent_sub_path: str) -> Iterator[ExportParams]:
        output_sub_path = parent_sub_path or '.'

        for child in self.vault.list_directory(folder):
            name = posixpath.basename(child.replace('\\', '/'))
            if name.startswith('.'):
                continue

            if self.vault.is_directory(child):
                if _normalize(child) in self.excluded_paths:
                    self.logger.debug(f"Skipping excluded folder '{child}'")
                    continue
                yield from self._walk_folder(child, posixpath.join(parent_sub_path, name))
            elif name.lower().endswith(MARKDOWN_EXTENSION):
                yield ExportParams(document=Document.from_path(child), output_sub_path=output_sub_path)
            else:
                self.logger.debug(f"Skipping non-markdown file '{child}'")
