"""Content rewriter producing the exported text of a note."""

import logging
import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

from models import Document, ExportSettings, LinkOccurrence
from vault import BaseVault, NotFoundError
from .link_scanner import LinkScanner, is_remote_link
from .path_synthesizer import PathSynthesizer
from .target_resolver import TargetResolver

FRONT_MATTER_PATTERN = re.compile(r'\A---(?:\n|\r\n)[\s\S]*?(?:\n|\r\n)---(?:\n|\r\n|\Z)')

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~"
URI_COMPONENT_SAFE_CHARS = "!*'()"

Replacement = Tuple[int, int, str]


def strip_front_matter(text: str) -> str:
    """Remove a leading ``---`` delimited metadata block."""
    return FRONT_MATTER_PATTERN.sub('', text, count=1)


def splice(text: str, replacements: List[Replacement]) -> str:
    """
    Apply span replacements to text.

    Args:
        text: Source text
        replacements: ``(start, end, new_text)`` tuples over ``text``; spans
            must not overlap

    Returns:
        Text with every span replaced
    """
    if not replacements:
        return text

    parts = []
    cursor = 0
    for start, end, new_text in sorted(replacements, key=lambda r: r[0]):
        if start < cursor:
            raise ValueError(f"Overlapping replacement at {start}")
        parts.append(text[cursor:start])
        parts.append(new_text)
        cursor = end
    parts.append(text[cursor:])
    return ''.join(parts)


class ContentRewriter:
    """
    Rewrites a note's text for export.

    This rewriter:
    1. Replaces local image links with links to the synthesized asset paths
    2. Strips wiki link brackets (optional)
    3. Converts wiki links to markdown links (optional)
    4. Reads every resolvable embedded note once
    5. Inlines embedded notes (one level, inlined text is not rescanned)

    Every step rescans the output of the previous one and replaces matches by
    their position, so identical spans elsewhere in the text are untouched.
    """

    def __init__(
        self,
        vault: BaseVault,
        settings: ExportSettings,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the content rewriter.

        Args:
            vault: Vault used to resolve links and read embedded notes
            settings: Frozen export settings
            logger: Logger instance
        """
        self.vault = vault
        self.settings = settings
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.content_rewriter')

        self.scanner = LinkScanner(settings.image_extensions, logger=self.logger)
        self.resolver = TargetResolver(vault, logger=self.logger)
        self.synthesizer = PathSynthesizer(settings, logger=self.logger)

    def rewrite(self, document: Document, raw_content: str, output_sub_path: str = '.') -> str:
        """
        Rewrite a document's content for export.

        Args:
            document: Document being exported
            raw_content: Document text as read from the vault
            output_sub_path: Document folder relative to the output root

        Returns:
            Rewritten document text

        Raises:
            IOFailureError: If an embedded note exists but cannot be read
        """
        self.logger.debug(f"Rewriting '{document.path}' (sub path: {output_sub_path})")

        content, images_rewritten = self._rewrite_image_links(document, raw_content, output_sub_path)

        links_rewritten = 0
        if self.settings.remove_outgoing_link_brackets and not self.settings.convert_wiki_links_to_markdown:
            content, links_rewritten = self._remove_outgoing_link_brackets(content)

        if self.settings.convert_wiki_links_to_markdown:
            content, links_rewritten = self._convert_wiki_links(content)

        embed_map = self._build_embed_map(document, content)
        content, embeds_inlined = self._inline_embeds(content, embed_map)

        self.logger.debug(
            f"Rewrote '{document.path}': {images_rewritten} images, "
            f"{links_rewritten} wiki links, {embeds_inlined} embeds"
        )
        return content

    def _rewrite_image_links(
        self,
        document: Document,
        content: str,
        output_sub_path: str
    ) -> Tuple[str, int]:
        replacements: List[Replacement] = []

        for occurrence in self.scanner.image_links(content):
            if is_remote_link(occurrence.target):
                continue

            resolved_name = self.resolver.resolve(occurrence.link_text, document.path).name
            reference = self.synthesizer.synthesize(resolved_name, document.name, output_sub_path)

            if self.settings.gfm:
                replacements.append((
                    occurrence.start,
                    occurrence.end,
                    self.settings.image_markdown_template.format(path=reference.link)
                ))
            else:
                replacements.append((occurrence.link_start, occurrence.target_end, reference.link))

        return splice(content, replacements), len(replacements)

    def _remove_outgoing_link_brackets(self, content: str) -> Tuple[str, int]:
        replacements = [
            (occurrence.start, occurrence.end, self._display_text(occurrence))
            for occurrence in self.scanner.outgoing_links(content)
        ]
        return splice(content, replacements), len(replacements)

    def _convert_wiki_links(self, content: str) -> Tuple[str, int]:
        replacements = []
        for occurrence in self.scanner.outgoing_links(content):
            note_name = occurrence.target
            target = note_name if note_name.lower().endswith('.md') else note_name + '.md'
            encoded = quote(target, safe=URI_COMPONENT_SAFE_CHARS)
            replacements.append((
                occurrence.start,
                occurrence.end,
                f'[{self._display_text(occurrence)}]({encoded})'
            ))
        return splice(content, replacements), len(replacements)

    @staticmethod
    def _display_text(occurrence: LinkOccurrence) -> str:
        return occurrence.alias or occurrence.target

    def _build_embed_map(self, document: Document, content: str) -> Dict[str, str]:
        """
        Read every resolvable embedded note once.

        Args:
            document: Document being exported
            content: Current document text

        Returns:
            Dict of {link_text: embedded_text}
        """
        embed_map: Dict[str, str] = {}

        for occurrence in self.scanner.note_embeds(content):
            link_text = occurrence.link_text
            if not link_text or link_text in embed_map:
                continue

            target = self.resolver.resolve(link_text, document.path)
            if not target.resolved or target.extension != '.md':
                self.logger.debug(f"Embed '{link_text}' in '{document.path}' not resolved - leaving as is")
                continue

            try:
                embed_value = self.vault.read_text(target.path)
            except NotFoundError:
                self.logger.warning(f"Embedded note '{target.path}' vanished while exporting '{document.path}'")
                continue

            if self.settings.remove_yaml_header:
                embed_value = strip_front_matter(embed_value)

            embed_map[link_text] = embed_value

        return embed_map

    def _inline_embeds(self, content: str, embed_map: Dict[str, str]) -> Tuple[str, int]:
        replacements = [
            (occurrence.start, occurrence.end, embed_map[occurrence.link_text])
            for occurrence in self.scanner.note_embeds(content)
            if occurrence.link_text in embed_map
        ]
        return splice(content, replacements), len(replacements)
