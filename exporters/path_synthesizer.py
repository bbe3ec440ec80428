"""Path synthesizer computing output names and links for copied assets."""

import hashlib
import logging
import posixpath
import re
from typing import Optional
from urllib.parse import quote

from models import Document, ExportSettings, OutputAssetReference

# Characters left untouched by URI encoding of a file name
URI_SAFE_CHARS = ";,/?:@&=+$-_.!~*'()#"

_REPEATED_SLASHES = re.compile(r'/{2,}')


def get_click_sub_route(output_sub_path: str, sep: str = '/') -> str:
    """
    Build the parent-directory prefix leading from a document back to the output root.

    Args:
        output_sub_path: Document folder relative to the output root, e.g. ``a/b``
        sep: Separator used in ``output_sub_path`` and in the result

    Returns:
        ``""`` for ``"."``, otherwise ``"../"`` once per path segment
    """
    if output_sub_path == '.':
        return ''
    parent_levels = len(output_sub_path.split(sep))
    return ('..' + sep) * parent_levels


def join_link_path(*parts: str) -> str:
    """Join path parts, skipping empty ones, normalized with forward slashes."""
    segments = [part.replace('\\', '/') for part in parts if part]
    if not segments:
        return '.'
    return posixpath.normpath(_REPEATED_SLASHES.sub('/', '/'.join(segments)))


class PathSynthesizer:
    """
    Computes deterministic output names and locations for image assets.

    The reference written into the document starts with the click path back
    to the output root and then follows the attachment placement policy. The
    copy destination follows the same policy from the output (or attachment)
    root. Both depend only on their arguments and the frozen settings.
    """

    def __init__(self, settings: ExportSettings, logger: Optional[logging.Logger] = None):
        """
        Initialize the path synthesizer.

        Args:
            settings: Frozen export settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.path_synthesizer')

    def asset_basename(self, name: str) -> str:
        """
        Output file name for an asset.

        Args:
            name: Decoded link name of the asset

        Returns:
            MD5 digest of the name plus extension when file name encoding is
            on, otherwise the original file name
        """
        stem, extension = posixpath.splitext(posixpath.basename(name))
        if self.settings.file_name_encode:
            stem = hashlib.md5(name.encode('utf-8')).hexdigest()
        return stem + extension

    @staticmethod
    def link_basename(basename: str) -> str:
        """URI-encoded form of an asset file name, as written into links."""
        return quote(basename, safe=URI_SAFE_CHARS)

    def attachment_directory(self, document_name: str) -> str:
        """Directory the assets of one document are copied into."""
        settings = self.settings
        return join_link_path(
            settings.output if settings.rel_attach_path else settings.attachment,
            self._document_folder(document_name),
            settings.attachment if settings.rel_attach_path else ''
        )

    def synthesize(
        self,
        name: str,
        document_name: str,
        output_sub_path: str = '.'
    ) -> OutputAssetReference:
        """
        Synthesize the output reference of one asset.

        Args:
            name: Decoded link name of the asset
            document_name: File name of the document referencing the asset
            output_sub_path: Document folder relative to the output root

        Returns:
            OutputAssetReference with the in-document link and copy destination
        """
        settings = self.settings
        basename = self.asset_basename(name)

        if settings.rel_attach_path:
            attachment_root = settings.attachment
        else:
            attachment_root = join_link_path(
                settings.custom_attach_path or settings.attachment,
                self._document_folder(document_name)
            )

        click_sub_route = get_click_sub_route(output_sub_path.replace('\\', '/'))
        link = join_link_path(click_sub_route, attachment_root, self.link_basename(basename))
        destination = join_link_path(self.attachment_directory(document_name), basename)

        return OutputAssetReference(link=link, destination=destination, basename=basename)

    def _document_folder(self, document_name: str) -> str:
        if not self.settings.include_file_name:
            return ''
        return Document(path=document_name, name=document_name).stem
