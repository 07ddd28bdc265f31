"""stakeview configuration: settings and structured logging."""

from .logging import configure_logging, log_error
from .settings import StakeviewSettings, get_settings

__all__ = [
    'configure_logging',
    'log_error',
    'StakeviewSettings',
    'get_settings'
]
