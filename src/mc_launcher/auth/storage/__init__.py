"""Secret storage backends."""

from mc_launcher.auth.storage.secret_store import (
    FileSecretStore,
    KeyringSecretStore,
    SecretStore,
    create_secret_store,
)

__all__ = [
    "SecretStore",
    "KeyringSecretStore",
    "FileSecretStore",
    "create_secret_store",
]
