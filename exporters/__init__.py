"""Markdown export package for the vault markdown export pipeline.

This package rewrites vault notes into a portable markdown tree: local images
are copied and relinked, embedded notes are inlined and wiki links can be
stripped or converted to plain markdown links.

Package Structure:
- link_scanner: Finds image embeds, markdown images, note embeds and wiki links
- target_resolver: Resolves link texts to vault files with a relative-path fallback
- path_synthesizer: Computes asset names, copy destinations and in-document links
- content_rewriter: Applies the rewriting steps to a note's text
- attachment_manager: Copies referenced images into the export tree
- document_walker: Turns a file or folder into per-note export parameters
- markdown_exporter: Main orchestrator exporting notes one at a time
- export_report: Console, JSON and CSV reports of an export run

Configuration Referenced:
- export.output_directory: Base output path for exported notes
- export.attachment_directory / custom_attach_path: Asset placement
- export.file_name_encode / gfm: Asset naming and link syntax
- export.remove_outgoing_link_brackets / convert_wiki_links_to_markdown: Wiki links
"""

from .attachment_manager import AttachmentManager
from .content_rewriter import ContentRewriter, strip_front_matter
from .document_walker import DocumentWalker
from .export_report import ExportReport
from .link_scanner import LinkScanner, is_remote_link
from .markdown_exporter import MarkdownExporter
from .path_synthesizer import PathSynthesizer, get_click_sub_route
from .target_resolver import TargetResolver, decode_link_name

__all__ = [
    'AttachmentManager',
    'ContentRewriter',
    'DocumentWalker',
    'ExportReport',
    'LinkScanner',
    'MarkdownExporter',
    'PathSynthesizer',
    'TargetResolver',
    'decode_link_name',
    'get_click_sub_route',
    'is_remote_link',
    'strip_front_matter'
]
