"""Vault backed by a directory on the local filesystem."""

import logging
import os
import posixpath
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .base_vault import (
    AlreadyExistsError,
    BaseVault,
    IOFailureError,
    NotFoundError,
    PathAmbiguousError
)

AMBIGUITY_MODES = ('closest', 'error')


class LocalVault(BaseVault):
    """
    Note store rooted at a local directory.

    Relative paths are resolved under the vault root, absolute paths are used
    as is. Link names are resolved the way note-taking apps resolve
    ``[[short links]]``: exact path first, then relative to the linking note,
    then by file name anywhere in the vault, preferring the candidate closest
    to the linking note.
    """

    def __init__(
        self,
        root: str,
        ambiguity: str = 'closest',
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the local vault.

        Args:
            root: Vault root directory
            ambiguity: 'closest' picks the nearest of several matches,
                'error' raises PathAmbiguousError instead
            logger: Logger instance
        """
        super().__init__(logger or logging.getLogger('vault_markdown_export.vault.local_vault'))
        if ambiguity not in AMBIGUITY_MODES:
            raise ValueError(f"ambiguity must be one of {AMBIGUITY_MODES}, got '{ambiguity}'")

        self.root = Path(root)
        self.ambiguity = ambiguity
        self._files: Optional[List[str]] = None

        if not self.root.is_dir():
            raise NotFoundError(f"Vault directory not found: {self.root}", path=str(root))

        self.logger.debug(f"LocalVault opened at {self.root}")

    def _abs(self, path: str) -> Path:
        if os.path.isabs(path):
            return Path(path)
        return self.root / path

    def _file_index(self) -> List[str]:
        """Vault-relative posix paths of every non-hidden file."""
        if self._files is None:
            files = []
            for dirpath, dirnames, filenames in os.walk(self.root):
                dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
                rel_dir = Path(dirpath).relative_to(self.root).as_posix()
                for filename in sorted(filenames):
                    if filename.startswith('.'):
                        continue
                    files.append(filename if rel_dir == '.' else f"{rel_dir}/{filename}")
            self._files = files
            self.logger.debug(f"Indexed {len(files)} files in {self.root}")
        return self._files

    def refresh(self) -> None:
        """Drop the file index so the next lookup rescans the vault."""
        self._files = None

    def read_text(self, path: str) -> str:
        target = self._abs(path)
        try:
            with open(target, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path}", path=path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailureError(f"Failed to read {path}: {e}", path=path) from e

    def resolve_link_target(self, name: str, from_path: str) -> Optional[str]:
        name = name.replace('\\', '/').strip()
        if name.startswith('./'):
            name = name[2:]
        if not name:
            return None

        files = self._file_index()
        file_set = set(files)
        variants = [name] if name.lower().endswith('.md') else [name, f"{name}.md"]

        # Exact vault path
        for variant in variants:
            if variant in file_set:
                return variant

        # Relative to the linking note
        source_dir = posixpath.dirname(from_path.replace('\\', '/'))
        if source_dir:
            for variant in variants:
                candidate = posixpath.normpath(posixpath.join(source_dir, variant))
                if candidate in file_set:
                    return candidate

        # By trailing path anywhere in the vault
        matches = self._match_suffix(files, variants, case_sensitive=True)
        if not matches:
            matches = self._match_suffix(files, variants, case_sensitive=False)
        if not matches:
            return None

        return self._pick_closest(name, matches, source_dir)

    @staticmethod
    def _match_suffix(files: List[str], variants: List[str], case_sensitive: bool) -> List[str]:
        matches = []
        for variant in variants:
            wanted = variant if case_sensitive else variant.lower()
            for path in files:
                candidate = path if case_sensitive else path.lower()
                if candidate == wanted or candidate.endswith('/' + wanted):
                    matches.append(path)
            if matches:
                break
        return matches

    def _pick_closest(self, name: str, matches: List[str], source_dir: str) -> str:
        if len(matches) == 1:
            return matches[0]

        ranked: Dict[str, Tuple[int, str]] = {
            path: (self._distance(source_dir, posixpath.dirname(path)), path)
            for path in matches
        }
        ordered = sorted(matches, key=lambda p: ranked[p])
        best, runner_up = ordered[0], ordered[1]

        if ranked[best][0] == ranked[runner_up][0] and self.ambiguity == 'error':
            raise PathAmbiguousError(
                f"Link '{name}' matches {len(matches)} files: {', '.join(ordered)}",
                path=name
            )

        self.logger.debug(f"Link '{name}' matched {len(matches)} files, using {best}")
        return best

    @staticmethod
    def _distance(source_dir: str, target_dir: str) -> int:
        source_parts = [p for p in source_dir.split('/') if p]
        target_parts = [p for p in target_dir.split('/') if p]
        common = 0
        for a, b in zip(source_parts, target_parts):
            if a != b:
                break
            common += 1
        return (len(source_parts) - common) + (len(target_parts) - common)

    def exists(self, path: str) -> bool:
        return self._abs(path).exists()

    def is_directory(self, path: str) -> bool:
        return self._abs(path).is_dir()

    def list_directory(self, path: str) -> List[str]:
        target = self._abs(path)
        if not target.is_dir():
            raise NotFoundError(f"Directory not found: {path}", path=path)

        try:
            names = sorted(os.listdir(target))
        except OSError as e:
            raise IOFailureError(f"Failed to list {path}: {e}", path=path) from e

        if os.path.isabs(path):
            return [str(target / child) for child in names]
        base = path.replace('\\', '/').strip('/')
        if base in ('', '.'):
            return names
        return [f"{base}/{child}" for child in names]

    def ensure_directory(self, path: str) -> None:
        target = self._abs(path)
        if target.is_dir():
            return
        try:
            target.mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            raise AlreadyExistsError(f"A file is in the way of folder {path}", path=path) from e
        except OSError as e:
            raise IOFailureError(f"Failed to create folder {path}: {e}", path=path) from e

    def copy_asset(self, source_path: str, dest_path: str) -> None:
        source = self._abs(source_path)
        dest = self._abs(dest_path)

        if not source.is_file():
            raise NotFoundError(f"Asset not found: {source_path}", path=source_path)
        if dest.exists():
            raise AlreadyExistsError(f"Asset already exists: {dest_path}", path=dest_path)

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        except OSError as e:
            raise IOFailureError(
                f"Failed to copy {source_path} to {dest_path}: {e}", path=dest_path
            ) from e

    def write_text(self, path: str, content: str, override: bool = False) -> None:
        target = self._abs(path)

        if target.exists() and not override:
            raise AlreadyExistsError(f"File already exists: {path}", path=path)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except OSError as e:
            raise IOFailureError(f"Failed to write {path}: {e}", path=path) from e
