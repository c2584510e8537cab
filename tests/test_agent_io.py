import pytest
from jsonschema import ValidationError

from vault_advisor.agent_io import (
    error_to_string,
    load_schema,
    validate_project_request,
    validate_recommend_and_project_request,
    validate_recommend_and_project_response,
    validate_recommend_request,
)
from vault_advisor.errors import RequestValidationError


def test_load_schema_by_name():
    schema = load_schema("recommend_and_project_request.schema.json")
    assert schema["title"] == "RecommendAndProjectRequest"
    with pytest.raises(FileNotFoundError):
        load_schema("nope.schema.json")


def test_recommend_and_project_request():
    validate_recommend_and_project_request(
        {"amountBase": "1000000000", "risk": "Balanced", "horizonMonths": 12, "network": "mainnet"}
    )
    with pytest.raises(RequestValidationError) as e:
        validate_recommend_and_project_request(
            {"amountBase": "12.5", "risk": "Balanced", "horizonMonths": 12, "network": "mainnet"}
        )
    assert e.value.status_code == 400
    assert e.value.message.endswith("at $.amountBase")
    with pytest.raises(RequestValidationError):
        validate_recommend_and_project_request(
            {"amountBase": "100", "risk": "Balanced", "horizonMonths": 9, "network": "mainnet"}
        )
    with pytest.raises(RequestValidationError):
        validate_recommend_and_project_request({"amountBase": "100", "risk": "Balanced", "horizonMonths": 12})


def test_recommend_request():
    validate_recommend_request({"amount": 100, "riskTolerance": "Aggressive", "timeHorizon": 36})
    with pytest.raises(RequestValidationError):
        validate_recommend_request({"amount": 0, "riskTolerance": "Aggressive", "timeHorizon": 12})
    with pytest.raises(RequestValidationError):
        validate_recommend_request({"amount": 10, "riskTolerance": "Reckless", "timeHorizon": 12})


def test_project_request():
    validate_project_request({"principal": 1000, "apy": 0})
    validate_project_request({"principal": 1000, "apy": 12, "timeHorizons": [6, 24], "monthlyContribution": 50})
    with pytest.raises(RequestValidationError):
        validate_project_request({"principal": -1, "apy": 12})
    with pytest.raises(RequestValidationError):
        validate_project_request({"principal": 1000})


def test_response_validation_raises_plain_error():
    with pytest.raises(ValidationError):
        validate_recommend_and_project_response({"vault": {}, "projection": [], "apiCalls": [], "success": True})


def test_error_to_string():
    with pytest.raises(RequestValidationError) as e:
        validate_recommend_request({"amount": 1, "riskTolerance": "Balanced", "timeHorizon": "x"})
    assert "at $.timeHorizon" in e.value.message
    assert error_to_string(KeyError("k")) == "KeyError: 'k'"
