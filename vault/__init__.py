"""Vault package providing file access and link-name resolution for exports."""

from .base_vault import (
    AlreadyExistsError,
    BaseVault,
    IOFailureError,
    NotFoundError,
    PathAmbiguousError,
    VaultError
)
from .local_vault import LocalVault


class VaultFactory:
    """Factory for creating vault instances based on configuration."""

    @staticmethod
    def create_vault(config: dict, logger=None):
        """Create the vault described by the ``vault`` config section.

        Args:
            config: Configuration dictionary
            logger: Logger instance

        Returns:
            BaseVault instance

        Raises:
            ValueError: If the vault path is missing
        """
        vault_config = config.get('vault', {})
        root = vault_config.get('path')
        if not root:
            raise ValueError("Missing required configuration: vault.path")

        return LocalVault(
            root=root,
            ambiguity=vault_config.get('ambiguous_links', 'closest'),
            logger=logger
        )


__all__ = [
    'AlreadyExistsError',
    'BaseVault',
    'IOFailureError',
    'LocalVault',
    'NotFoundError',
    'PathAmbiguousError',
    'VaultError',
    'VaultFactory'
]
