"""Errors raised by the staking views."""
from cache.exceptions import InvalidPreloadDataError, PreloadFetchError


class StakingError(Exception):
    """Base class for staking view errors."""


class MissingResourceError(StakingError):
    """The account lacks the staking resources the caller expected."""

    def __init__(self, account_id: str, resource: str):
        super().__init__(f"account {account_id}: {resource} is required")
        self.account_id = account_id
        self.resource = resource


__all__ = [
    'StakingError',
    'MissingResourceError',
    'PreloadFetchError',
    'InvalidPreloadDataError'
]
