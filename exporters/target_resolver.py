"""Target resolver mapping link texts to concrete vault files."""

import logging
import posixpath
from typing import Optional
from urllib.parse import unquote

from models import ResolvedTarget
from vault import BaseVault, NotFoundError, PathAmbiguousError

PARENT_SEGMENT = '../'


def decode_link_name(link_text: str) -> str:
    """
    Decode a raw link text into the name used for resolution and naming.

    Percent-encoding is decoded, any ``|alias`` suffix is dropped and leading
    ``../`` segments are stripped, since they only make sense relative to the
    source note and not once the asset is re-rooted into the output tree.

    Args:
        link_text: Raw link text as found in the note

    Returns:
        Decoded link name
    """
    # Spacing around '|' as in '![[img.png | 300]]' is not part of the name
    name = unquote(link_text).split('|', 1)[0].strip()
    while name.startswith(PARENT_SEGMENT):
        name = name[len(PARENT_SEGMENT):]
    return name


class TargetResolver:
    """Resolves link texts through the vault with a relative-path fallback."""

    def __init__(self, vault: BaseVault, logger: Optional[logging.Logger] = None):
        """
        Initialize the target resolver.

        Args:
            vault: Vault providing name resolution
            logger: Logger instance
        """
        self.vault = vault
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.target_resolver')

    def resolve(self, link_text: str, source_path: str) -> ResolvedTarget:
        """
        Resolve a link text found in a source document.

        Never raises: when the vault finds no single match the decoded name is
        interpreted as a path relative to the source document's folder.

        Args:
            link_text: Raw link text
            source_path: Vault path of the document containing the link

        Returns:
            ResolvedTarget with ``resolved`` telling whether the vault matched
        """
        name = decode_link_name(link_text)

        found = None
        try:
            found = self.vault.resolve_link_target(name, source_path)
        except PathAmbiguousError as e:
            self.logger.debug(f"Ambiguous link '{name}' in '{source_path}': {e}")
        except NotFoundError:
            found = None

        if found is not None:
            return ResolvedTarget(link_text=link_text, name=name, path=found, resolved=True)

        fallback = posixpath.normpath(
            posixpath.join(posixpath.dirname(source_path.replace('\\', '/')), name)
        )
        self.logger.debug(
            f"Link '{name}' in '{source_path}' not resolved, falling back to '{fallback}'"
        )
        return ResolvedTarget(link_text=link_text, name=name, path=fallback, resolved=False)
