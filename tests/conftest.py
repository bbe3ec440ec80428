"""Shared fixtures: an in-memory vault and export settings."""

import posixpath
from typing import Dict, List, Optional, Set

import pytest

from models import ExportSettings
from vault import (
    AlreadyExistsError,
    BaseVault,
    IOFailureError,
    NotFoundError,
    PathAmbiguousError
)


def _norm(path: str) -> str:
    return posixpath.normpath(path.replace('\\', '/'))


class InMemoryVault(BaseVault):
    """Dict backed vault for exercising the exporter without a filesystem."""

    def __init__(self, files: Optional[Dict[str, str]] = None, strict: bool = False):
        super().__init__()
        self.files: Dict[str, str] = {}
        self.directories: Set[str] = {'.'}
        self.broken: Set[str] = set()
        self.copies: List[tuple] = []
        self.strict = strict
        for path, content in (files or {}).items():
            self.add_file(path, content)

    def add_file(self, path: str, content: str) -> None:
        path = _norm(path)
        self.files[path] = content
        parent = posixpath.dirname(path)
        while parent:
            self.directories.add(parent)
            parent = posixpath.dirname(parent)

    def read_text(self, path: str) -> str:
        path = _norm(path)
        if path in self.broken:
            raise IOFailureError(f"Cannot read {path}", path=path)
        if path not in self.files:
            raise NotFoundError(f"File not found: {path}", path=path)
        return self.files[path]

    def resolve_link_target(self, name: str, from_path: str) -> Optional[str]:
        variants = [name] if name.endswith('.md') else [name, f"{name}.md"]
        for variant in variants:
            if variant in self.files:
                return variant

        matches = sorted(
            path for path in self.files
            if any(path.endswith('/' + variant) for variant in variants)
        )
        if len(matches) > 1 and self.strict:
            raise PathAmbiguousError(f"'{name}' matches {matches}", path=name)
        return matches[0] if matches else None

    def exists(self, path: str) -> bool:
        path = _norm(path)
        return path in self.files or path in self.directories

    def is_directory(self, path: str) -> bool:
        return _norm(path) in self.directories

    def list_directory(self, path: str) -> List[str]:
        path = _norm(path)
        if path not in self.directories:
            raise NotFoundError(f"Directory not found: {path}", path=path)

        children = set()
        for entry in list(self.files) + list(self.directories):
            if entry != '.' and (posixpath.dirname(entry) or '.') == path:
                children.add(entry)
        return sorted(children)

    def ensure_directory(self, path: str) -> None:
        path = _norm(path)
        if path in self.files:
            raise AlreadyExistsError(f"A file is in the way of {path}", path=path)
        while path and path != '.':
            self.directories.add(path)
            path = posixpath.dirname(path)

    def copy_asset(self, source_path: str, dest_path: str) -> None:
        source_path, dest_path = _norm(source_path), _norm(dest_path)
        if source_path not in self.files:
            raise NotFoundError(f"Asset not found: {source_path}", path=source_path)
        if dest_path in self.files:
            raise AlreadyExistsError(f"Asset already exists: {dest_path}", path=dest_path)
        self.add_file(dest_path, self.files[source_path])
        self.copies.append((source_path, dest_path))

    def write_text(self, path: str, content: str, override: bool = False) -> None:
        path = _norm(path)
        if path in self.files and not override:
            raise AlreadyExistsError(f"File already exists: {path}", path=path)
        self.add_file(path, content)


@pytest.fixture
def memory_vault():
    """Small vault with notes, nested notes and images."""
    return InMemoryVault({
        'notes/a.md': 'Intro ![[img.png]]\n',
        'notes/img.png': 'PNG',
        'notes/sub/deep.md': 'Deep note ![diagram](diagram.svg)\n',
        'notes/sub/diagram.svg': '<svg/>',
        'B.md': 'B body ![[C]]',
        'C.md': 'C body',
        'Note.md': 'Plain note',
    })


@pytest.fixture
def settings():
    """Readable, unhashed asset names in an ``assets`` folder."""
    return ExportSettings(
        output='out',
        attachment='assets',
        file_name_encode=False,
        rel_attach_path=True
    )
