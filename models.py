"""Data models for the vault markdown export pipeline."""

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

logger = logging.getLogger('vault_markdown_export')

DEFAULT_IMAGE_EXTENSIONS = frozenset({
    'png', 'jpg', 'jpeg', 'jpe', 'gif', 'bmp', 'svg', 'webp', 'avif',
    'tif', 'tiff', 'ico', 'heic', 'pdf', 'mp3', 'wav', 'm4a', 'ogg',
    'mp4', 'mov', 'm4v', 'webm'
})

DEFAULT_IMAGE_MARKDOWN_TEMPLATE = '![]({path})'


class LinkCategory(Enum):
    """Categories of link occurrences recognized in note text."""
    IMAGE_EMBED = "image_embed"
    MARKDOWN_IMAGE = "markdown_image"
    NOTE_EMBED = "note_embed"
    OUTGOING_LINK = "outgoing_link"


class ExportStatus(Enum):
    """Outcome of exporting a single document."""
    EXPORTED = "exported"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class Document:
    """A named, path-addressed note inside the vault."""

    path: str
    name: str
    raw_content: Optional[str] = None

    @classmethod
    def from_path(cls, path: str) -> 'Document':
        """Build a document from its vault-relative path."""
        normalized = path.replace('\\', '/')
        return cls(path=normalized, name=posixpath.basename(normalized))

    @property
    def stem(self) -> str:
        """Document name without its markdown extension."""
        if self.name.endswith('.md'):
            return self.name[:-3]
        return self.name


@dataclass(frozen=True)
class LinkOccurrence:
    """
    A link matched inside a document's text.

    ``start``/``end`` delimit ``raw_span`` in the scanned text and
    ``link_start``/``link_end`` delimit ``link_text`` inside the same text.
    """

    category: LinkCategory
    raw_span: str
    link_text: str
    start: int
    end: int
    link_start: int
    link_end: int

    @property
    def target(self) -> str:
        """Link text before any ``|`` alias separator."""
        return self.link_text.split('|', 1)[0]

    @property
    def alias(self) -> Optional[str]:
        """Alias or display hint after ``|``, if any."""
        if '|' not in self.link_text:
            return None
        return self.link_text.split('|', 1)[1]

    @property
    def target_end(self) -> int:
        """End index of the target part of the link text."""
        return self.link_start + len(self.target)


@dataclass(frozen=True)
class ResolvedTarget:
    """Outcome of resolving a link text against the vault."""

    link_text: str
    name: str
    path: str
    resolved: bool

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.path)[1].lower()


@dataclass(frozen=True)
class OutputAssetReference:
    """Synthesized output location for a copied asset."""

    link: str
    destination: str
    basename: str


@dataclass(frozen=True)
class ExportSettings:
    """
    Frozen export configuration threaded through one export run.

    Built once by ``ConfigLoader.build_settings`` and never mutated, so every
    component sees the same values for the duration of the export.
    """

    output: str = 'output'
    attachment: str = 'attachment'
    custom_attach_path: str = ''
    rel_attach_path: bool = True
    include_file_name: bool = False
    file_name_encode: bool = True
    gfm: bool = True
    image_markdown_template: str = DEFAULT_IMAGE_MARKDOWN_TEMPLATE
    remove_yaml_header: bool = False
    remove_outgoing_link_brackets: bool = False
    convert_wiki_links_to_markdown: bool = False
    custom_file_name: str = ''
    override_existing: bool = True
    image_extensions: FrozenSet[str] = DEFAULT_IMAGE_EXTENSIONS

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to dictionary."""
        return {
            'output': self.output,
            'attachment': self.attachment,
            'custom_attach_path': self.custom_attach_path,
            'rel_attach_path': self.rel_attach_path,
            'include_file_name': self.include_file_name,
            'file_name_encode': self.file_name_encode,
            'gfm': self.gfm,
            'image_markdown_template': self.image_markdown_template,
            'remove_yaml_header': self.remove_yaml_header,
            'remove_outgoing_link_brackets': self.remove_outgoing_link_brackets,
            'convert_wiki_links_to_markdown': self.convert_wiki_links_to_markdown,
            'custom_file_name': self.custom_file_name,
            'override_existing': self.override_existing,
            'image_extensions': sorted(self.image_extensions)
        }


@dataclass(frozen=True)
class ExportParams:
    """A document paired with its sub path below the output root."""

    document: Document
    output_sub_path: str = '.'


@dataclass
class DocumentExportResult:
    """Tracks the export outcome of one document for reporting."""

    document: Document
    status: ExportStatus
    output_path: Optional[str] = None
    error_message: Optional[str] = None
    asset_stats: Dict[str, int] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status != ExportStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Serialize result to dictionary."""
        return {
            'path': self.document.path,
            'status': self.status.value,
            'output_path': self.output_path,
            'error': self.error_message,
            'assets': dict(self.asset_stats)
        }


__all__ = [
    'DEFAULT_IMAGE_EXTENSIONS',
    'DEFAULT_IMAGE_MARKDOWN_TEMPLATE',
    'Document',
    'DocumentExportResult',
    'ExportParams',
    'ExportSettings',
    'ExportStatus',
    'LinkCategory',
    'LinkOccurrence',
    'OutputAssetReference',
    'ResolvedTarget'
]
