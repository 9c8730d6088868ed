"""Configuration loading for vpn-crl-sync."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


class VaultSettings(BaseModel):
    """Connection settings for the Vault PKI secrets engine."""

    address: str = Field(description="Vault base URL (e.g. https://vault:8200)")
    token: Optional[str] = Field(default=None, description="Vault token")
    namespace: Optional[str] = Field(default=None, description="Vault namespace")
    pki_path: str = Field(description="PKI mount path (e.g. pki-vpn)")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    verify: bool = Field(default=True, description="Verify TLS certificates")


class GatewaySettings(BaseModel):
    """AWS Client VPN endpoint settings."""

    client_vpn_endpoint_id: str = Field(description="Client VPN endpoint ID")
    region: Optional[str] = Field(default=None, description="AWS region")


class SyncConfig(BaseModel):
    """Top-level configuration file."""

    vault: VaultSettings
    gateway: GatewaySettings
    deprovisioned_users: list[str] = Field(
        default_factory=list, description="Users whose certificates are all revoked"
    )

    @classmethod
    def from_config(cls, config_path: str | Path) -> "SyncConfig":
        """Load configuration from a YAML file.

        VAULT_ADDR and VAULT_TOKEN from the environment fill in a missing
        vault address or token.

        Args:
            config_path: Path to YAML config file

        Returns:
            SyncConfig instance

        Raises:
            ConfigurationError: If config file cannot be loaded or validated
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read config {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config {config_path} must be a mapping")

        vault = data.get("vault") or {}
        if not isinstance(vault, dict):
            raise ConfigurationError(f"Config {config_path}: 'vault' must be a mapping")
        data["vault"] = vault
        if not vault.get("address") and os.environ.get("VAULT_ADDR"):
            vault["address"] = os.environ["VAULT_ADDR"]
        if not vault.get("token") and os.environ.get("VAULT_TOKEN"):
            vault["token"] = os.environ["VAULT_TOKEN"]

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {config_path}: {e}") from e

    def save(self, config_path: str | Path) -> None:
        """Save configuration to a YAML file, leaving out the vault token.

        Args:
            config_path: Path to save YAML config
        """
        data = self.model_dump(mode="json", exclude={"vault": {"token"}})
        with open(Path(config_path), "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
