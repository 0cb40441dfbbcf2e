"""Enumerations used in shipyard files and event payloads."""

from __future__ import annotations

from enum import Enum


class ApprovalStrategy(Enum):
    """How a step in a stage gets approved."""

    AUTOMATIC = 0
    MANUAL = 1

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str) -> ApprovalStrategy:
        """Parse a strategy name, ignoring case; unknown names give AUTOMATIC."""
        return _APPROVAL_BY_NAME.get(value.lower(), cls.AUTOMATIC)


class CanaryAction(Enum):
    """A step in the life of a canary release."""

    SET = 0
    PROMOTE = 1
    DISCARD = 2

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str) -> CanaryAction:
        """Parse an action name, ignoring case; unknown names give SET."""
        return _CANARY_BY_NAME.get(value.lower(), cls.SET)


class DeploymentStrategy(Enum):
    """How a managed service is deployed."""

    DIRECT = 1
    DUPLICATE = 2
    USER_MANAGED = 3

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str) -> DeploymentStrategy | None:
        """Parse a strategy name, ignoring case; unknown names give None."""
        return _DEPLOYMENT_BY_NAME.get(value.lower())


_APPROVAL_BY_NAME = {
    "automatic": ApprovalStrategy.AUTOMATIC,
    "manual": ApprovalStrategy.MANUAL,
}

_CANARY_BY_NAME = {
    "set": CanaryAction.SET,
    "promote": CanaryAction.PROMOTE,
    "discard": CanaryAction.DISCARD,
}

_DEPLOYMENT_BY_NAME = {
    "direct": DeploymentStrategy.DIRECT,
    "duplicate": DeploymentStrategy.DUPLICATE,
    "blue_green_service": DeploymentStrategy.DUPLICATE,
    "user_managed": DeploymentStrategy.USER_MANAGED,
}


def get_deployment_strategy(deployment_strategy: str) -> DeploymentStrategy:
    """Look up a deployment strategy by its exact name.

    Raises ValueError if the name is not a supported strategy.
    """
    try:
        return _DEPLOYMENT_BY_NAME[deployment_strategy]
    except KeyError:
        raise ValueError(
            f"The deployment strategy {deployment_strategy} is invalid"
        ) from None