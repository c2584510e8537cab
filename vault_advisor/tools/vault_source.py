"""
Vault universe source.

PURPOSE: Return the raw DeFindex vault records for a network, from the remote
         endpoint in VAULTS_API_URL when configured, otherwise (or when that call
         fails) from the snapshot bundled under vault_advisor/data/.
CONTEXT: Both sources use the DeFindex GraphQL response shape
         {"data": {"deFindexVaults": {"nodes": [RawVaultRecord, ...]}}}.
"""

from __future__ import annotations

import json
import pathlib
from functools import lru_cache
from typing import Any, Dict, List, Tuple

import structlog

from vault_advisor.config import get_settings
from vault_advisor.errors import VaultSourceError
from vault_advisor.model_interface.types import RawVaultRecord
from vault_advisor.tools import http_tool

log = structlog.get_logger(__name__)

DATA_DIR = pathlib.Path(__file__).resolve().parent.parent / "data"
NETWORKS = ("testnet", "mainnet")


@lru_cache(maxsize=4)
def _load_snapshot_cached(network: str) -> Dict[str, Any]:
    p = DATA_DIR / f"vaults_{network}.json"
    return json.loads(p.read_text(encoding="utf-8"))


def load_snapshot(network: str) -> Dict[str, Any]:
    """Bundled universe in GraphQL shape; any unknown network reads mainnet."""
    return _load_snapshot_cached("testnet" if network == "testnet" else "mainnet")


def extract_nodes(payload: Any) -> List[RawVaultRecord]:
    """
    Pull the vault list out of a GraphQL-shaped payload.

    raises:
    - VaultSourceError – if the payload does not have the expected shape.
    """
    try:
        nodes = payload["data"]["deFindexVaults"]["nodes"]
    except (KeyError, TypeError) as e:
        raise VaultSourceError(f"unexpected vault payload shape: missing {e}") from e
    if not isinstance(nodes, list):
        raise VaultSourceError("unexpected vault payload shape: nodes is not a list")
    return nodes


def get_vault_data(network: str) -> Tuple[List[RawVaultRecord], str]:
    """
    Fetch the vault universe for a network.

    returns:
    - (records, source): source is "remote" or "snapshot".

    notes:
    - A remote failure is logged and answered from the snapshot; it never propagates.
    """
    settings = get_settings()
    if settings.vaults_api_url:
        try:
            payload = http_tool.fetch_json(settings.vaults_api_url, params={"network": network})
            records = extract_nodes(payload)
            log.info("vaults.fetched", network=network, source="remote", count=len(records))
            return records, "remote"
        except VaultSourceError as e:
            log.warning("vaults.remote_failed", network=network, error=str(e))

    records = extract_nodes(load_snapshot(network))
    log.info("vaults.fetched", network=network, source="snapshot", count=len(records))
    return [dict(r) for r in records], "snapshot"
