class DeploymentError(Exception):
    """Base class for every failure raised by the deployer."""


class ConfigurationError(DeploymentError):
    """A required setting is missing or names something unknown."""


class ArtifactNotFoundError(DeploymentError):
    """No (or more than one) compiled artifact matches a contract name."""


class TransactionError(DeploymentError):
    """RPC failure, rejected transaction, reverted receipt or receipt timeout."""


class VerificationError(DeploymentError):
    """The block explorer rejected a verification request."""
