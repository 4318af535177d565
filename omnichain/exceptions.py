"""
Exceptions raised by the omnichain operations toolkit
"""


class ConfigurationError(Exception):
    """Authored configuration is wrong. Raised before any transaction is sent."""


class DeploymentNotFoundError(ConfigurationError):
    """A contract the task depends on has no deployment record on this network"""


class RateLimitLookupError(LookupError):
    """On-chain rate limit state was not fetched for a resolved destination"""


class TransactionFailedError(Exception):
    """A transaction was mined but reverted"""


class RoleStateError(Exception):
    """Access control state does not allow, or did not reflect, a role change"""
