"""Tests for configuration loading, validation and settings building."""

import argparse

import pytest

from config_loader import ConfigLoader, get_nested
from models import DEFAULT_IMAGE_EXTENSIONS, ExportSettings


def valid_config(**export):
    return {'vault': {'path': '/notes'}, 'export': export}


class TestLoad:
    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv('NOTES_DIR', '/home/me/notes')
        config_file = tmp_path / 'config.yaml'
        config_file.write_text(
            'vault:\n  path: ${NOTES_DIR}\nexport:\n  output_directory: ${MISSING_VAR}/out\n',
            encoding='utf-8'
        )

        config = ConfigLoader.load(str(config_file))

        assert config['vault']['path'] == '/home/me/notes'
        assert config['export']['output_directory'] == '${MISSING_VAR}/out'

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text('', encoding='utf-8')

        assert ConfigLoader.load(str(config_file)) == {}

    def test_non_mapping(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text('- a\n- b\n', encoding='utf-8')

        with pytest.raises(ValueError):
            ConfigLoader.load(str(config_file))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / 'absent.yaml'))


class TestValidate:
    def test_minimal_config(self):
        ConfigLoader.validate(valid_config())

    def test_vault_path_required(self):
        with pytest.raises(ValueError, match='vault.path'):
            ConfigLoader.validate({'export': {}})

    def test_unsubstituted_vault_path(self):
        with pytest.raises(ValueError, match='NOTES_DIR'):
            ConfigLoader.validate({'vault': {'path': '${NOTES_DIR}'}})

    def test_ambiguity_mode(self):
        config = valid_config()
        config['vault']['ambiguous_links'] = 'first'

        with pytest.raises(ValueError):
            ConfigLoader.validate(config)

    @pytest.mark.parametrize('export', [
        {'gfm': 'yes'},
        {'output_directory': 42},
        {'output_directory': ''},
        {'attachment_directory': ''},
        {'image_markdown_template': '![]()'},
        {'image_markdown_template': '![]({path}){other}'},
        {'custom_file_name': 'a/index'},
        {'image_extensions': 'png'},
    ])
    def test_invalid_export_values(self, export):
        with pytest.raises(ValueError):
            ConfigLoader.validate(valid_config(**export))

    def test_run_section(self):
        config = valid_config()
        config['run'] = {'dry_run': True, 'report_path': 'r.json', 'csv_report_path': 'r.csv'}

        ConfigLoader.validate(config)

    @pytest.mark.parametrize('run', [
        {'dry_run': 'yes'},
        {'report_path': 42},
        {'csv_report_path': ['r.csv']},
        ['dry_run'],
    ])
    def test_invalid_run_values(self, run):
        config = valid_config()
        config['run'] = run

        with pytest.raises(ValueError, match='run'):
            ConfigLoader.validate(config)

    def test_invalid_log_level(self):
        config = valid_config()
        config['logging'] = {'level': 'LOUD'}

        with pytest.raises(ValueError):
            ConfigLoader.validate(config)


class TestBuildSettings:
    def test_defaults(self):
        assert ConfigLoader.build_settings(valid_config()) == ExportSettings()

    def test_export_section(self):
        settings = ConfigLoader.build_settings(valid_config(
            output_directory='site',
            attachment_directory='img',
            relative_attachment_path=False,
            file_name_encode=False,
            convert_wiki_links_to_markdown=True,
            image_extensions=['.PNG', 'drawio'],
        ))

        assert settings.output == 'site'
        assert settings.attachment == 'img'
        assert settings.rel_attach_path is False
        assert settings.file_name_encode is False
        assert settings.convert_wiki_links_to_markdown is True
        assert settings.image_extensions == frozenset({'png', 'drawio'})

    def test_settings_are_frozen(self):
        settings = ConfigLoader.build_settings(valid_config())

        with pytest.raises(AttributeError):
            settings.gfm = False
        assert settings.image_extensions == DEFAULT_IMAGE_EXTENSIONS


class TestMergeWithArgs:
    def test_cli_overrides(self):
        args = argparse.Namespace(
            vault='/other', output='build', dry_run=True, report_path='r.json',
            csv_report_path='r.csv', log_file='export.log', verbose=2
        )

        merged = ConfigLoader.merge_with_args(valid_config(output_directory='site'), args)

        assert merged['vault']['path'] == '/other'
        assert merged['export']['output_directory'] == 'build'
        assert merged['run'] == {'dry_run': True, 'report_path': 'r.json', 'csv_report_path': 'r.csv'}
        assert merged['logging'] == {'file': 'export.log', 'level': 'DEBUG'}

    def test_original_untouched(self):
        config = valid_config(output_directory='site')
        args = argparse.Namespace(vault=None, output='build', dry_run=None, verbose=0)

        merged = ConfigLoader.merge_with_args(config, args)

        assert config['export']['output_directory'] == 'site'
        assert merged['vault']['path'] == '/notes'
        assert 'dry_run' not in merged['run']


def test_get_nested():
    config = {'a': {'b': {'c': 1}}}

    assert get_nested(config, 'a.b.c') == 1
    assert get_nested(config, 'a.x.c', 'fallback') == 'fallback'
