"""
HashiCorp Vault client for invoicing secrets.

AppRole authentication, configured from the environment. Every path is
scoped under the 'invoicing/' prefix; callers cannot read outside it.
Missing configuration fails at startup rather than on first use.
"""

import os
import logging
from typing import Dict

import hvac
from hvac.exceptions import InvalidPath, Unauthorized, Forbidden

logger = logging.getLogger(__name__)

_SECRET_PREFIX = "invoicing"

# Process-wide client and field cache
_vault_client_instance: "VaultClient | None" = None
_secret_cache: Dict[str, str] = {}


class VaultError(Exception):
    """Vault operation failed. The service cannot start without its secrets."""


class VaultClient:
    """AppRole-authenticated reader for KV v2 secrets under invoicing/."""

    def __init__(
        self,
        vault_addr: str | None = None,
        vault_namespace: str | None = None,
    ):
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_namespace = vault_namespace or os.getenv("VAULT_NAMESPACE")
        self.vault_role_id = os.getenv("VAULT_ROLE_ID")
        self.vault_secret_id = os.getenv("VAULT_SECRET_ID")

        if not self.vault_addr:
            raise VaultError("VAULT_ADDR environment variable is required")
        if not self.vault_role_id or not self.vault_secret_id:
            raise VaultError("VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required")

        client_kwargs = {"url": self.vault_addr}
        if self.vault_namespace:
            client_kwargs["namespace"] = self.vault_namespace

        self.client = hvac.Client(**client_kwargs)
        self._login()

        if not self.client.is_authenticated():
            raise VaultError("Vault authentication failed")

        logger.info("Vault client initialized: %s", self.vault_addr)

    def _login(self) -> None:
        try:
            auth_response = self.client.auth.approle.login(
                role_id=self.vault_role_id,
                secret_id=self.vault_secret_id,
            )
        except (Unauthorized, Forbidden) as e:
            logger.error("AppRole login rejected: %s", e)
            raise VaultError(f"AppRole login rejected: {e}") from e
        self.client.token = auth_response["auth"]["client_token"]

    def get_secret(self, path: str, field: str) -> str:
        """
        Read one field of a KV v2 secret.

        Args:
            path: Path relative to invoicing/ (e.g. 'database')
            field: Field within the secret (e.g. 'url')

        Raises:
            VaultError: Path missing or access denied
            KeyError: Field not present in the secret
        """
        full_path = f"{_SECRET_PREFIX}/{path}"

        try:
            response = self.client.secrets.kv.v2.read_secret_version(
                path=full_path, raise_on_deleted_version=True
            )
        except InvalidPath as e:
            logger.error("Secret path not found: %s", full_path)
            raise VaultError(f"Secret path '{full_path}' not found in Vault") from e
        except (Unauthorized, Forbidden) as e:
            logger.error("Access denied to secret %s: %s", full_path, e)
            raise VaultError(f"Access denied to secret '{full_path}'") from e

        secret_data = response["data"]["data"]
        if field not in secret_data:
            raise KeyError(
                f"Field '{field}' not found in secret '{full_path}'. "
                f"Available: {', '.join(sorted(secret_data))}"
            )
        return secret_data[field]


def _get_client() -> VaultClient:
    global _vault_client_instance
    if _vault_client_instance is None:
        _vault_client_instance = VaultClient()
    return _vault_client_instance


def _cached_secret(path: str, field: str) -> str:
    cache_key = f"{_SECRET_PREFIX}/{path}/{field}"
    if cache_key not in _secret_cache:
        _secret_cache[cache_key] = _get_client().get_secret(path, field)
    return _secret_cache[cache_key]


def reset_vault_cache() -> None:
    """Forget the client and cached fields (credential rotation, tests)."""
    global _vault_client_instance
    _vault_client_instance = None
    _secret_cache.clear()


def get_database_url() -> str:
    """PostgreSQL connection URL for the invoicing role."""
    return _cached_secret("database", "url")
