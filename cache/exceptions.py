"""Errors raised by the preload cache."""


class PreloadError(Exception):
    """Base class for preload cache errors."""


class UnknownNetworkError(PreloadError):
    """No preloader is registered for the requested network."""

    def __init__(self, network_id: str):
        super().__init__(f"No preloader registered for network {network_id!r}")
        self.network_id = network_id


class PreloadFetchError(PreloadError):
    """Fetching fresh preload data failed. The previous snapshot stays current."""

    def __init__(self, network_id: str, message: str):
        super().__init__(f"{network_id}: {message}")
        self.network_id = network_id


class InvalidPreloadDataError(PreloadFetchError):
    """A fetched or stored blob does not have the expected preload data shape."""
