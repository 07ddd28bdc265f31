"""
Core preload cache for stakeview.

This module keeps one published snapshot of network-wide preload data
(validator set and metadata) per network. Snapshots are fetched by a
per-network preloader, validated, published in memory and persisted through
an injected storage capability.
"""
import asyncio
import itertools
import time
from typing import Any, Callable, Dict, List, Optional, Protocol

import structlog

from config.logging import log_error
from error_handling.circuit_breaker import CircuitBreaker, CircuitBreakerError

from . import monitoring
from .exceptions import PreloadFetchError, UnknownNetworkError
from .storage import CacheStorage

logger = structlog.get_logger()

Observer = Callable[[Any], None]


class Preloader(Protocol):
    """Network specific part of the cache: how to fetch and check data."""

    async def preload(self, network: Any) -> Any:
        ...

    def validate(self, data: Any) -> Any:
        ...

    def default(self) -> Any:
        ...


class PreloadCache:
    """
    Keyed cache mapping a network id to its current preload snapshot.

    Every prepare() takes a sequence number when it starts. A result is only
    published when its number is newer than the one already published, so a
    slow fetch that completes late never replaces a snapshot from a fetch
    that started after it.
    """

    def __init__(self, storage: CacheStorage, breaker: Optional[CircuitBreaker] = None):
        """
        Initialize the preload cache.

        Args:
            storage: Capability used to load and persist snapshots
            breaker: Optional circuit breaker wrapping preloader fetches
        """
        self._storage = storage
        self._breaker = breaker
        self._preloaders: Dict[str, Preloader] = {}
        self._snapshots: Dict[str, Any] = {}
        self._published_seq: Dict[str, int] = {}
        self._saved_seq: Dict[str, int] = {}
        self._save_locks: Dict[str, asyncio.Lock] = {}
        self._observers: Dict[str, List[Observer]] = {}
        self._sequence = itertools.count(1)
        self._prepares = 0
        self._failures = 0
        self._stale = 0

    def register(self, network: Any, preloader: Preloader) -> None:
        """Register the preloader responsible for a network."""
        self._preloaders[network.id] = preloader
        logger.debug("preloader_registered", network=network.id)

    def _get_preloader(self, network: Any) -> Preloader:
        preloader = self._preloaders.get(network.id)
        if preloader is None:
            raise UnknownNetworkError(network.id)
        return preloader

    def get_current(self, network: Any) -> Any:
        """
        Get the most recently published snapshot for a network.

        Returns the preloader's bootstrap default before anything was
        published.
        """
        snapshot = self._snapshots.get(network.id)
        if snapshot is not None:
            return snapshot
        return self._get_preloader(network).default()

    def has_snapshot(self, network: Any) -> bool:
        return network.id in self._snapshots

    def subscribe(self, network: Any, observer: Observer) -> Callable[[], None]:
        """
        Call observer with every snapshot published for network.

        Returns:
            A function removing the subscription
        """
        observers = self._observers.setdefault(network.id, [])
        observers.append(observer)

        def unsubscribe() -> None:
            if observer in observers:
                observers.remove(observer)

        return unsubscribe

    def _publish(self, network_id: str, snapshot: Any, seq: int) -> None:
        self._snapshots[network_id] = snapshot
        self._published_seq[network_id] = seq
        for observer in list(self._observers.get(network_id, [])):
            try:
                observer(snapshot)
            except Exception as e:
                log_error(logger, e, {"event_source": "preload_observer", "network": network_id})

    async def _fetch(self, preloader: Preloader, network: Any) -> Any:
        if self._breaker is None:
            return await preloader.preload(network)
        return await self._breaker.call_async(preloader.preload, network)

    async def prepare(self, network: Any) -> Any:
        """
        Fetch, publish and persist fresh preload data for a network.

        Returns:
            The snapshot current after this call

        Raises:
            UnknownNetworkError: If no preloader is registered for network
            PreloadFetchError: If fetching or validating the data failed
        """
        preloader = self._get_preloader(network)
        seq = next(self._sequence)
        logger.debug("preload_prepare_started", network=network.id, seq=seq)

        started = time.monotonic()
        try:
            raw = await self._fetch(preloader, network)
            snapshot = preloader.validate(raw)
        except PreloadFetchError as e:
            self._failures += 1
            monitoring.record_failure(network.id, type(e).__name__)
            log_error(logger, e, {"network": network.id, "seq": seq})
            raise
        except CircuitBreakerError as e:
            self._failures += 1
            monitoring.record_failure(network.id, "circuit_open")
            log_error(logger, e, {"network": network.id, "seq": seq})
            raise PreloadFetchError(network.id, str(e)) from e
        except Exception as e:
            self._failures += 1
            monitoring.record_failure(network.id, "fetch")
            log_error(logger, e, {"network": network.id, "seq": seq})
            raise PreloadFetchError(network.id, f"fetch failed: {e}") from e

        if seq < self._published_seq.get(network.id, 0):
            self._stale += 1
            monitoring.record_stale(network.id)
            logger.info("preload_result_stale",
                        network=network.id,
                        seq=seq,
                        published_seq=self._published_seq[network.id])
            return self.get_current(network)

        self._publish(network.id, snapshot, seq)
        self._prepares += 1
        monitoring.record_prepare(network.id, time.monotonic() - started)
        logger.info("preload_published", network=network.id, seq=seq)

        await self._persist(network)
        return snapshot

    async def _persist(self, network: Any) -> None:
        # Saves are serialized per network and always write the newest
        # published snapshot, so storage never ends up behind memory.
        lock = self._save_locks.setdefault(network.id, asyncio.Lock())
        async with lock:
            seq = self._published_seq.get(network.id, 0)
            if seq <= self._saved_seq.get(network.id, 0):
                return
            await self._storage.save_data(network, self._snapshots[network.id])
            self._saved_seq[network.id] = seq

    async def hydrate(self, network: Any) -> Optional[Any]:
        """
        Load the persisted snapshot for a network on cold start.

        Stored data is only published while nothing has been published for
        the network yet, so it can never replace a fresher prepared snapshot.

        Returns:
            The hydrated snapshot, or None if nothing usable was stored
        """
        preloader = self._get_preloader(network)
        if self.has_snapshot(network):
            logger.debug("preload_hydrate_skipped", network=network.id)
            return None

        data = await self._storage.get_data(network)
        if data is None:
            logger.debug("preload_hydrate_empty", network=network.id)
            return None

        try:
            snapshot = preloader.validate(data)
        except PreloadFetchError as e:
            log_error(logger, e, {"network": network.id, "stage": "hydrate"})
            return None

        if self.has_snapshot(network):
            logger.info("preload_hydrate_superseded", network=network.id)
            return None

        self._publish(network.id, snapshot, 0)
        logger.info("preload_hydrated", network=network.id)
        return snapshot

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        return {
            'networks': sorted(self._snapshots),
            'registered': sorted(self._preloaders),
            'prepares': self._prepares,
            'failures': self._failures,
            'stale': self._stale,
        }
