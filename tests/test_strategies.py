import pytest

from keptnkit.strategies import (
    ApprovalStrategy,
    CanaryAction,
    DeploymentStrategy,
    get_deployment_strategy,
)


@pytest.mark.parametrize("member", list(ApprovalStrategy))
def test_approval_round_trip(member):
    assert ApprovalStrategy.parse(str(member)) is member


def test_approval_names():
    assert str(ApprovalStrategy.parse("automatic")) == "automatic"
    assert str(ApprovalStrategy.parse("manual")) == "manual"


def test_approval_parse_ignores_case():
    assert ApprovalStrategy.parse("MaNuAl") is ApprovalStrategy.MANUAL


def test_approval_unknown_is_automatic():
    assert ApprovalStrategy.parse("whenever") is ApprovalStrategy.AUTOMATIC


@pytest.mark.parametrize("member", list(CanaryAction))
def test_canary_round_trip(member):
    assert CanaryAction.parse(str(member).upper()) is member


def test_canary_names():
    parsed = [CanaryAction.parse(name) for name in ("set", "promote", "discard")]
    assert parsed == list(CanaryAction)
    assert [str(action) for action in parsed] == ["set", "promote", "discard"]


def test_canary_unknown_is_set():
    assert CanaryAction.parse("rollout") is CanaryAction.SET


@pytest.mark.parametrize("member", list(DeploymentStrategy))
def test_deployment_round_trip(member):
    assert get_deployment_strategy(str(member)) is member
    assert DeploymentStrategy.parse(str(member)) is member


def test_deployment_names():
    assert str(get_deployment_strategy("user_managed")) == "user_managed"
    assert str(DeploymentStrategy.parse("blue_green_service")) == "duplicate"


def test_blue_green_alias_is_duplicate():
    assert get_deployment_strategy("blue_green_service") is DeploymentStrategy.DUPLICATE
    assert DeploymentStrategy.parse("BLUE_GREEN_SERVICE") is DeploymentStrategy.DUPLICATE


def test_get_deployment_strategy_invalid():
    with pytest.raises(ValueError, match="The deployment strategy canary is invalid"):
        get_deployment_strategy("canary")


def test_get_deployment_strategy_is_case_sensitive():
    with pytest.raises(ValueError):
        get_deployment_strategy("DIRECT")


def test_deployment_parse_ignores_case_and_unknown_is_none():
    assert DeploymentStrategy.parse("DIRECT") is DeploymentStrategy.DIRECT
    assert DeploymentStrategy.parse("canary") is None