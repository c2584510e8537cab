from vault_advisor.utils.units import (
    format_human_amount,
    get_asset_symbol,
    get_stellar_expert_link,
    to_base_units,
    to_human_units,
)

from conftest import USDC, USDT


def test_base_unit_conversions():
    assert to_base_units(100) == "1000000000"
    assert to_base_units(100.5) == "1005000000"
    # rounds down below one stroop
    assert to_base_units(1.23456789) == "12345678"
    assert to_human_units("1000000000") == 100.0
    assert to_human_units(1) == 1e-7


def test_asset_labels_and_links():
    assert get_asset_symbol(USDC) == "USDC"
    assert get_asset_symbol(USDT) == "USDT"
    assert get_asset_symbol("CUNKNOWN") == "TOKEN"
    assert format_human_amount(102.956, USDT) == "102.96 USDT"
    assert get_stellar_expert_link("CABC", "testnet") == "https://stellar.expert/explorer/testnet/contract/CABC"
    assert get_stellar_expert_link("CABC", "mainnet") == "https://stellar.expert/explorer/public/contract/CABC"
