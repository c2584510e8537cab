# PURPOSE: Environment-driven settings for the vault advisor.
# CONTEXT: Read once per process by get_settings(); tests call
#          get_settings.cache_clear() after monkeypatching the environment.

from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """
    attributes:
    - vaults_api_url: str|None – remote vault universe endpoint; None uses the bundled snapshot
    - default_network: str – network used when a request does not name one
    - http_timeout_s: float – per-request timeout for the vault source
    - http_retries: int – retries on connection errors and 5xx responses
    - service_name / env: str – bound onto every log line
    """
    vaults_api_url: Optional[str] = None
    default_network: str = "mainnet"
    http_timeout_s: float = 10.0
    http_retries: int = 2
    service_name: str = "StellarVaultAdvisor"
    env: str = "dev"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        vaults_api_url=os.getenv("VAULTS_API_URL") or None,
        default_network=os.getenv("DEFAULT_NETWORK", "mainnet"),
        http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", "10")),
        http_retries=int(os.getenv("HTTP_RETRIES", "2")),
        service_name=os.getenv("SERVICE_NAME", "StellarVaultAdvisor"),
        env=os.getenv("ENV", "dev"),
    )
