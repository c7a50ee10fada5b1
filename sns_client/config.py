"""Load .env and settings.yaml, expose all configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

log = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Sonic mainnet deployments.
DEFAULT_REGISTRY = "0x0A6e0e2a41CD0a4BfB119b2e8183791E21600a7E"
DEFAULT_REGISTRAR = "0x0D9ECE9d71F038444BDB4317a058774867af39eB"
DEFAULT_RESOLVER = "0x105E9Bfb2f06F4809B0c323Fb8299d813793742e"


def _load_env() -> None:
    env_path = PROJECT_ROOT / ".env"
    load_dotenv(env_path)


def _load_yaml() -> dict:
    settings_path = PROJECT_ROOT / "settings.yaml"
    if settings_path.exists():
        try:
            with open(settings_path) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError:
            log.warning("Failed to parse settings.yaml, using defaults")
            return {}
    return {}


class Settings(BaseModel):
    rpc_url: str = ""
    account: str = ""
    registry_address: str = DEFAULT_REGISTRY
    registrar_address: str = DEFAULT_REGISTRAR
    resolver_address: str = DEFAULT_RESOLVER
    cache_enabled: bool = True
    # All durations in seconds.
    cache_ttl: float = Field(default=300, gt=0)
    cache_max_entries: int = Field(default=1000, ge=1)
    cache_sweep_interval: float = Field(default=60, gt=0)
    availability_ttl: float = Field(default=30, gt=0)
    pricing_ttl: float = Field(default=1800, gt=0)
    retry_attempts: int = Field(default=3, ge=1, le=10)
    retry_delay: float = Field(default=1.0, ge=0)
    request_timeout: float = Field(default=15.0, gt=0)

    @field_validator("rpc_url", "account")
    @classmethod
    def strip_strings(cls, v: str) -> str:
        return v.strip()

    @property
    def contracts(self) -> dict[str, str]:
        """Contract role → deployed address."""
        return {
            "registry": self.registry_address,
            "registrar": self.registrar_address,
            "resolver": self.resolver_address,
        }


def load_settings() -> Settings:
    _load_env()
    raw = _load_yaml()
    raw["rpc_url"] = os.getenv("SNS_RPC_URL", raw.get("rpc_url", ""))
    raw["account"] = os.getenv("SNS_ACCOUNT", raw.get("account", ""))
    return Settings(**raw)
