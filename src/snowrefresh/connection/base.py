"""Base connector class with profile loading and keypair authentication."""

import os
from pathlib import Path
from typing import Optional, Any, Dict

import keyring
from cryptography.hazmat.primitives import serialization
from pydantic import SecretStr

from snowrefresh.config.config import load_profile


class BaseConnector:
    """Loads a connection profile, applies overrides and prepares credentials"""

    def __init__(self, profile: str, **overrides: Any) -> None:
        self.private_key: Optional[Any] = None
        self._profile = profile
        self._cfg: Dict[str, Any] = load_profile(profile)
        self._cfg.update(overrides)

        if self._cfg.get("authenticator", "").upper() == "SNOWFLAKE_JWT":
            self._load_private_key()

    @property
    def params(self) -> Dict[str, Any]:
        """Connection parameters handed to snowflake.connector.connect"""
        params = {
            key: value
            for key, value in self._cfg.items()
            if key not in ("private_key_file", "private_key_passphrase_env",
                           "use_keyring", "keyring_service", "keyring_username")
        }
        if self.private_key is not None:
            params["private_key"] = self.private_key
        return params

    def _load_private_key(self) -> None:
        """Deserialize the PEM private key named by 'private_key_file'"""
        key_path = self._key_path()
        passphrase = self._key_passphrase()

        try:
            pem = key_path.read_bytes()
            self.private_key = serialization.load_pem_private_key(
                pem,
                password=passphrase.get_secret_value().encode() if passphrase else None,
            )
        except (OSError, ValueError, TypeError) as e:
            raise IOError(f"Failed to read or decrypt private key from {key_path}: {e}") from e

    def _key_path(self) -> Path:
        private_key_file = self._cfg.get("private_key_file")
        if not private_key_file:
            raise ValueError(
                "Keypair authentication requires 'private_key_file' in profile configuration"
            )

        key_path = Path(private_key_file).expanduser()
        if not key_path.is_absolute():
            raise ValueError(
                f"Private key path must be absolute or use ~ for home directory. Got: {private_key_file}"
            )
        if not key_path.exists():
            raise FileNotFoundError(f"Private key file not found: {key_path}")
        return key_path

    def _key_passphrase(self) -> Optional[SecretStr]:
        """Passphrase from the named environment variable, then from keyring if enabled"""
        env_var = self._cfg.get("private_key_passphrase_env")
        if env_var and os.environ.get(env_var):
            return SecretStr(os.environ[env_var])

        if not self._cfg.get("use_keyring", False):
            return None

        service = self._cfg.get("keyring_service", f"snowrefresh.{self._profile}")
        username = self._cfg.get("keyring_username", self._cfg.get("user"))
        if not username:
            raise ValueError(
                "Keyring usage requires 'user' in profile or 'keyring_username' override."
            )

        stored = keyring.get_password(service, username)
        return SecretStr(stored) if stored else None
