"""Link scanner extracting image, embed and wiki link occurrences from note text."""

import logging
import posixpath
import re
from typing import Iterable, List, Optional

from models import DEFAULT_IMAGE_EXTENSIONS, LinkCategory, LinkOccurrence

MAX_CHARS_BETWEEN_BRACKETS = 1000  # Prevent catastrophic backtracking

# ![[payload]] and [[payload]]; group 1 is the embed marker
BRACKET_LINK_PATTERN = re.compile(
    r'(!?)\[\[([^\[\]\n]{1,' + str(MAX_CHARS_BETWEEN_BRACKETS) + r'})\]\]'
)

# ![alt](target.ext), optionally followed by a "title"
MARKDOWN_IMAGE_PATTERN = re.compile(
    r'!\[([^\]\n]*)\]\(([^)\n]*?\.\w+)(?:\s+"[^"\n]*")?\)'
)

REMOTE_LINK_PATTERN = re.compile(r'^(?:[A-Za-z][A-Za-z0-9+.\-]*:)?//|^(?:data|mailto|javascript):', re.IGNORECASE)


def is_remote_link(target: str) -> bool:
    """Check whether a link target is a web/remote URL rather than a local asset."""
    return bool(REMOTE_LINK_PATTERN.match(target.strip()))


class LinkScanner:
    """
    Extracts link occurrences from raw markdown text.

    Bracket links are found in one tokenizing pass and tagged by category:
    an embed whose target carries a known attachment extension is an image
    embed, any other embed is a note embed, and a bracket link without the
    ``!`` marker is an outgoing wiki link. Markdown images are matched
    separately. All results come back in document order.
    """

    def __init__(
        self,
        image_extensions: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the link scanner.

        Args:
            image_extensions: Extensions (without dot) treated as attachments
            logger: Logger instance
        """
        extensions = image_extensions if image_extensions is not None else DEFAULT_IMAGE_EXTENSIONS
        self.image_extensions = frozenset(ext.lower().lstrip('.') for ext in extensions)
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.link_scanner')

    def scan(self, text: str) -> List[LinkOccurrence]:
        """
        Scan text for every link category.

        Args:
            text: Raw markdown text

        Returns:
            Occurrences of all categories sorted by position
        """
        occurrences = self._scan_bracket_links(text) + self._scan_markdown_images(text)
        occurrences.sort(key=lambda occurrence: occurrence.start)
        return occurrences

    def image_links(self, text: str) -> List[LinkOccurrence]:
        """Image embeds and markdown images in document order."""
        return [
            occurrence for occurrence in self.scan(text)
            if occurrence.category in (LinkCategory.IMAGE_EMBED, LinkCategory.MARKDOWN_IMAGE)
        ]

    def note_embeds(self, text: str) -> List[LinkOccurrence]:
        return [o for o in self._scan_bracket_links(text) if o.category == LinkCategory.NOTE_EMBED]

    def outgoing_links(self, text: str) -> List[LinkOccurrence]:
        return [o for o in self._scan_bracket_links(text) if o.category == LinkCategory.OUTGOING_LINK]

    def is_image_target(self, target: str) -> bool:
        """Check whether a link target names a file with an attachment extension."""
        extension = posixpath.splitext(target.strip())[1].lstrip('.').lower()
        return bool(extension) and extension in self.image_extensions

    def _scan_bracket_links(self, text: str) -> List[LinkOccurrence]:
        occurrences = []
        for match in BRACKET_LINK_PATTERN.finditer(text):
            is_embed = match.group(1) == '!'
            payload = match.group(2)

            if not is_embed:
                category = LinkCategory.OUTGOING_LINK
            elif self.is_image_target(payload.split('|', 1)[0]):
                category = LinkCategory.IMAGE_EMBED
            else:
                category = LinkCategory.NOTE_EMBED

            occurrences.append(LinkOccurrence(
                category=category,
                raw_span=match.group(0),
                link_text=payload,
                start=match.start(),
                end=match.end(),
                link_start=match.start(2),
                link_end=match.end(2)
            ))
        return occurrences

    def _scan_markdown_images(self, text: str) -> List[LinkOccurrence]:
        occurrences = []
        for match in MARKDOWN_IMAGE_PATTERN.finditer(text):
            occurrences.append(LinkOccurrence(
                category=LinkCategory.MARKDOWN_IMAGE,
                raw_span=match.group(0),
                link_text=match.group(2),
                start=match.start(),
                end=match.end(),
                link_start=match.start(2),
                link_end=match.end(2)
            ))
        return occurrences
