"""Tests for the filesystem backed vault."""

import pytest

from vault import (
    AlreadyExistsError,
    LocalVault,
    NotFoundError,
    PathAmbiguousError,
    VaultFactory
)


@pytest.fixture
def vault_dir(tmp_path):
    files = {
        'Home.md': 'home',
        'projects/Roadmap.md': 'roadmap',
        'projects/img/chart.png': 'chart',
        'archive/Roadmap.md': 'old roadmap',
        'archive/2023/Notes.md': 'notes',
        'x/shared.png': 'x',
        'y/shared.png': 'y',
        '.obsidian/app.json': '{}',
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    return tmp_path


class TestLocalVaultReading:
    def test_missing_root(self, tmp_path):
        with pytest.raises(NotFoundError):
            LocalVault(str(tmp_path / 'nope'))

    def test_invalid_ambiguity_mode(self, vault_dir):
        with pytest.raises(ValueError):
            LocalVault(str(vault_dir), ambiguity='random')

    def test_read_text(self, vault_dir):
        assert LocalVault(str(vault_dir)).read_text('projects/Roadmap.md') == 'roadmap'

    def test_read_missing(self, vault_dir):
        with pytest.raises(NotFoundError):
            LocalVault(str(vault_dir)).read_text('missing.md')

    def test_list_directory(self, vault_dir):
        vault = LocalVault(str(vault_dir))

        assert vault.list_directory('projects') == ['projects/Roadmap.md', 'projects/img']
        assert 'Home.md' in vault.list_directory('.')

    def test_list_missing_directory(self, vault_dir):
        with pytest.raises(NotFoundError):
            LocalVault(str(vault_dir)).list_directory('missing')


class TestLocalVaultResolution:
    def test_exact_path_and_implicit_extension(self, vault_dir):
        vault = LocalVault(str(vault_dir))

        assert vault.resolve_link_target('Home', 'projects/Roadmap.md') == 'Home.md'
        assert vault.resolve_link_target('archive/2023/Notes', 'Home.md') == 'archive/2023/Notes.md'

    def test_relative_to_source(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        assert vault.resolve_link_target('img/chart.png', 'projects/Roadmap.md') == 'projects/img/chart.png'

    def test_by_file_name(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        assert vault.resolve_link_target('chart.png', 'Home.md') == 'projects/img/chart.png'

    def test_case_insensitive_fallback(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        assert vault.resolve_link_target('CHART.PNG', 'Home.md') == 'projects/img/chart.png'

    def test_closest_match_wins(self, vault_dir):
        vault = LocalVault(str(vault_dir))

        assert vault.resolve_link_target('Roadmap', 'archive/2023/Notes.md') == 'archive/Roadmap.md'
        assert vault.resolve_link_target('Roadmap', 'projects/img/x.md') == 'projects/Roadmap.md'

    def test_tie_broken_alphabetically(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        assert vault.resolve_link_target('shared.png', 'Home.md') == 'x/shared.png'

    def test_tie_raises_in_error_mode(self, vault_dir):
        vault = LocalVault(str(vault_dir), ambiguity='error')

        with pytest.raises(PathAmbiguousError):
            vault.resolve_link_target('shared.png', 'Home.md')

    def test_hidden_files_ignored(self, vault_dir):
        assert LocalVault(str(vault_dir)).resolve_link_target('app.json', 'Home.md') is None

    def test_refresh_picks_up_new_files(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        assert vault.resolve_link_target('Later', 'Home.md') is None

        (vault_dir / 'Later.md').write_text('later', encoding='utf-8')
        vault.refresh()

        assert vault.resolve_link_target('Later', 'Home.md') == 'Later.md'


class TestLocalVaultWriting:
    def test_copy_asset(self, vault_dir):
        vault = LocalVault(str(vault_dir))

        vault.copy_asset('projects/img/chart.png', 'out/assets/chart.png')

        assert (vault_dir / 'out' / 'assets' / 'chart.png').read_text(encoding='utf-8') == 'chart'

    def test_copy_asset_never_overwrites(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        vault.copy_asset('x/shared.png', 'out/shared.png')

        with pytest.raises(AlreadyExistsError):
            vault.copy_asset('y/shared.png', 'out/shared.png')
        assert (vault_dir / 'out' / 'shared.png').read_text(encoding='utf-8') == 'x'

    def test_copy_missing_asset(self, vault_dir):
        with pytest.raises(NotFoundError):
            LocalVault(str(vault_dir)).copy_asset('missing.png', 'out/missing.png')

    def test_write_text_override(self, vault_dir):
        vault = LocalVault(str(vault_dir))
        vault.write_text('out/Home.md', 'first')

        with pytest.raises(AlreadyExistsError):
            vault.write_text('out/Home.md', 'second')

        vault.write_text('out/Home.md', 'third', override=True)
        assert vault.read_text('out/Home.md') == 'third'

    def test_ensure_directory(self, vault_dir):
        vault = LocalVault(str(vault_dir))

        vault.ensure_directory('out/a/b')
        vault.ensure_directory('out/a/b')

        assert vault.is_directory('out/a/b')

    def test_absolute_paths_bypass_root(self, vault_dir, tmp_path_factory):
        elsewhere = tmp_path_factory.mktemp('export')
        vault = LocalVault(str(vault_dir))

        vault.write_text(str(elsewhere / 'Home.md'), 'home')

        assert (elsewhere / 'Home.md').read_text(encoding='utf-8') == 'home'


class TestVaultFactory:
    def test_creates_local_vault(self, vault_dir):
        vault = VaultFactory.create_vault({'vault': {'path': str(vault_dir), 'ambiguous_links': 'error'}})

        assert isinstance(vault, LocalVault)
        assert vault.ambiguity == 'error'

    def test_requires_path(self):
        with pytest.raises(ValueError):
            VaultFactory.create_vault({'vault': {}})
