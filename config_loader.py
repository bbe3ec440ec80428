"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict

import yaml

from models import DEFAULT_IMAGE_EXTENSIONS, DEFAULT_IMAGE_MARKDOWN_TEMPLATE, ExportSettings

BOOLEAN_EXPORT_FIELDS = (
    'relative_attachment_path',
    'include_file_name',
    'file_name_encode',
    'gfm',
    'remove_yaml_header',
    'remove_outgoing_link_brackets',
    'convert_wiki_links_to_markdown',
    'override_existing'
)

STRING_EXPORT_FIELDS = (
    'output_directory',
    'attachment_directory',
    'custom_attach_path',
    'image_markdown_template',
    'custom_file_name'
)


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        # Substitute environment variables recursively
        config_data = cls._substitute_env_vars_recursive(config_data)

        return config_data

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        cls._validate_required_field(config, 'vault.path')

        ambiguity = get_nested(config, 'vault.ambiguous_links', 'closest')
        if ambiguity not in ['closest', 'error']:
            raise ValueError("vault.ambiguous_links must be 'closest' or 'error'")

        export_config = get_nested(config, 'export', {})
        if not isinstance(export_config, dict):
            raise ValueError("export must be a mapping")

        for key in BOOLEAN_EXPORT_FIELDS:
            value = export_config.get(key)
            if value is not None and not isinstance(value, bool):
                raise ValueError(f"export.{key} must be a boolean")

        for key in STRING_EXPORT_FIELDS:
            value = export_config.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"export.{key} must be a string")

        if not export_config.get('output_directory', 'output'):
            raise ValueError("export.output_directory must not be empty")

        if not export_config.get('attachment_directory', 'attachment'):
            raise ValueError("export.attachment_directory must not be empty")

        template = export_config.get('image_markdown_template', DEFAULT_IMAGE_MARKDOWN_TEMPLATE)
        if '{path}' not in template:
            raise ValueError("export.image_markdown_template must contain '{path}'")
        try:
            template.format(path='x')
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"export.image_markdown_template is not a valid template: {e}")

        custom_file_name = export_config.get('custom_file_name') or ''
        if '/' in custom_file_name or '\\' in custom_file_name:
            raise ValueError("export.custom_file_name must be a plain file name")

        extensions = export_config.get('image_extensions')
        if extensions is not None:
            if not isinstance(extensions, list) or not all(isinstance(ext, str) and ext for ext in extensions):
                raise ValueError("export.image_extensions must be a list of extensions")

        run_config = get_nested(config, 'run') or {}
        if not isinstance(run_config, dict):
            raise ValueError("run must be a mapping")
        dry_run = run_config.get('dry_run')
        if dry_run is not None and not isinstance(dry_run, bool):
            raise ValueError("run.dry_run must be a boolean")
        for key in ('report_path', 'csv_report_path'):
            value = run_config.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"run.{key} must be a string")

        level = get_nested(config, 'logging.level')
        if level is not None and str(level).upper() not in {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}:
            raise ValueError("logging.level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    @classmethod
    def build_settings(cls, config: Dict[str, Any]) -> ExportSettings:
        """
        Freeze the export section into the settings of one export run.

        Args:
            config: Validated configuration dictionary

        Returns:
            ExportSettings instance
        """
        export_config = get_nested(config, 'export', {}) or {}

        extensions = export_config.get('image_extensions')
        image_extensions = (
            frozenset(ext.lower().lstrip('.') for ext in extensions)
            if extensions else DEFAULT_IMAGE_EXTENSIONS
        )

        return ExportSettings(
            output=export_config.get('output_directory', 'output'),
            attachment=export_config.get('attachment_directory', 'attachment'),
            custom_attach_path=export_config.get('custom_attach_path') or '',
            rel_attach_path=export_config.get('relative_attachment_path', True),
            include_file_name=export_config.get('include_file_name', False),
            file_name_encode=export_config.get('file_name_encode', True),
            gfm=export_config.get('gfm', True),
            image_markdown_template=export_config.get(
                'image_markdown_template', DEFAULT_IMAGE_MARKDOWN_TEMPLATE
            ),
            remove_yaml_header=export_config.get('remove_yaml_header', False),
            remove_outgoing_link_brackets=export_config.get('remove_outgoing_link_brackets', False),
            convert_wiki_links_to_markdown=export_config.get('convert_wiki_links_to_markdown', False),
            custom_file_name=export_config.get('custom_file_name') or '',
            override_existing=export_config.get('override_existing', True),
            image_extensions=image_extensions
        )

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        # Ensure nested dictionaries exist
        for section in ('vault', 'export', 'logging', 'run'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        if getattr(args, 'vault', None):
            merged['vault']['path'] = args.vault

        if getattr(args, 'output', None):
            merged['export']['output_directory'] = args.output

        if getattr(args, 'dry_run', None) is not None:
            merged['run']['dry_run'] = args.dry_run

        if getattr(args, 'report_path', None):
            merged['run']['report_path'] = args.report_path

        if getattr(args, 'csv_report_path', None):
            merged['run']['csv_report_path'] = args.csv_report_path

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        verbose = getattr(args, 'verbose', 0)
        if verbose:
            merged['logging']['level'] = 'DEBUG' if verbose >= 2 else 'INFO'

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config_section: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config_section, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        # Check for unsubstituted environment variables
        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "export.output_directory")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = ['ConfigLoader', 'get_nested']
