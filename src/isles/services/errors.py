"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created."""


class ConfigurationError(Exception):
    """Raised when world generation is asked for a grid that cannot hold an island."""


class CombatContractError(Exception):
    """Raised when combat operations are called out of sequence."""
