# PURPOSE: Convert between Stellar base units (stroops, 7 implied decimals) and
#          human amounts, and label assets/contracts for display.
# CONTEXT: Amounts cross the HTTP boundary as integer strings in base units and
#          enter the analysis chain as human floats.

from decimal import Decimal, ROUND_FLOOR

from vault_advisor.constants.risk_tiers import ASSET_SYMBOLS

STELLAR_DECIMALS = 7


def to_base_units(amount, decimals=STELLAR_DECIMALS):
    """
    Convert a human amount to an integer base-unit string, rounding down.

    parameters:
    - amount: float | str | Decimal – human amount, e.g. 100.5.
    - decimals: int – implied decimals of the asset (7 on Stellar).

    returns:
    - str – e.g. "1005000000".

    notes:
    - Goes through str() so float noise like 100.49999999 is not floored a unit low.
    """
    scaled = Decimal(str(amount)) * (Decimal(10) ** decimals)
    return str(scaled.to_integral_value(rounding=ROUND_FLOOR))


def to_human_units(base_units, decimals=STELLAR_DECIMALS):
    """Base-unit integer (or digit string) to a human float."""
    return float(Decimal(str(base_units)) / (Decimal(10) ** decimals))


def get_asset_symbol(asset_address):
    return ASSET_SYMBOLS.get(asset_address, "TOKEN")


def get_stellar_expert_link(contract_id, network):
    network_path = "testnet" if network == "testnet" else "public"
    return f"https://stellar.expert/explorer/{network_path}/contract/{contract_id}"


def format_human_amount(balance, asset_address):
    return f"{balance:.2f} {get_asset_symbol(asset_address)}"
