# PURPOSE: Resolve the VaultModel the pipeline ranks vaults with.
# CONTEXT: VAULT_MODEL_MODULE="package.module:factory" swaps in another recommender
#          (e.g. a learned ranker) without touching pipeline.py.

import importlib
import os

import structlog

from vault_advisor.model_interface.vault_model import VaultModel

log = structlog.get_logger(__name__)


def load_model() -> VaultModel:
    """
    returns:
    - VaultModel – factory() from VAULT_MODEL_MODULE, or the HeuristicModel when unset.

    raises:
    - ValueError – if VAULT_MODEL_MODULE is not of the form "module:factory".
    """
    setting = os.getenv("VAULT_MODEL_MODULE")
    if not setting:
        from vault_advisor.model_impl.heuristic_model import HeuristicModel
        return HeuristicModel()

    module_name, sep, factory_name = setting.partition(":")
    if not sep or not module_name or not factory_name:
        raise ValueError(f"VAULT_MODEL_MODULE must look like 'module:factory', got {setting!r}")
    model = getattr(importlib.import_module(module_name), factory_name)()
    log.info("model.loaded", model=setting)
    return model
