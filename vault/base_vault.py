"""Abstract vault interface and the typed error taxonomy of vault operations."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional


class VaultError(Exception):
    """Base exception for vault-related errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NotFoundError(VaultError):
    """Source document, embed target or asset does not exist."""
    pass


class AlreadyExistsError(VaultError):
    """Destination file or folder is already present."""
    pass


class PathAmbiguousError(VaultError):
    """A link name matches zero or several candidates."""
    pass


class IOFailureError(VaultError):
    """Underlying read, write or copy failure other than the above."""
    pass


class BaseVault(ABC):
    """
    Abstract base class for note stores the exporter reads from and writes to.

    Paths are posix-style strings. Relative paths address entries inside the
    vault; absolute paths address the host filesystem directly.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize base vault with a logger.

        Args:
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.logger = logger or logging.getLogger('vault_markdown_export.vault')

    @abstractmethod
    def read_text(self, path: str) -> str:
        """
        Read a text file.

        Args:
            path: File path

        Returns:
            File content

        Raises:
            NotFoundError: If the file does not exist
            IOFailureError: If the file cannot be read
        """
        pass

    @abstractmethod
    def resolve_link_target(self, name: str, from_path: str) -> Optional[str]:
        """
        Resolve a short link name to the best matching vault file.

        Args:
            name: Link name, possibly without extension or partial path
            from_path: Path of the document containing the link

        Returns:
            Vault path of the matching file, or None if nothing matches
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        pass

    @abstractmethod
    def list_directory(self, path: str) -> List[str]:
        """
        List the direct children of a directory.

        Args:
            path: Directory path

        Returns:
            Child paths (same addressing as ``path``)

        Raises:
            NotFoundError: If the directory does not exist
        """
        pass

    @abstractmethod
    def ensure_directory(self, path: str) -> None:
        """Create a directory and its parents if absent."""
        pass

    @abstractmethod
    def copy_asset(self, source_path: str, dest_path: str) -> None:
        """
        Copy a file.

        Raises:
            NotFoundError: If the source does not exist
            AlreadyExistsError: If the destination already exists
            IOFailureError: On any other copy failure
        """
        pass

    @abstractmethod
    def write_text(self, path: str, content: str, override: bool = False) -> None:
        """
        Write a text file.

        Args:
            path: Destination path
            content: Text content
            override: Replace an existing file instead of failing

        Raises:
            AlreadyExistsError: If the file exists and override is off
            IOFailureError: On any other write failure
        """
        pass
