"""Registry mapping transport names to delivery strategies."""

import logging
from typing import Dict, Iterator

from ....core.exceptions import UnknownTransport
from ..entities.protocols import TransportStrategy

logger = logging.getLogger(__name__)


class TransportRegistry:
    """Transport name -> strategy lookup.

    Populated at startup and only read afterwards, so lookups take no lock.
    """

    def __init__(self, strategies: Dict[str, TransportStrategy] = None):
        self._strategies: Dict[str, TransportStrategy] = {}
        for name, strategy in (strategies or {}).items():
            self.register(name, strategy)

    def register(self, name: str, strategy: TransportStrategy) -> None:
        name = name.strip().lower()
        if name in self._strategies:
            logger.warning(f"Replacing delivery strategy for transport '{name}'")
        self._strategies[name] = strategy
        logger.debug(f"Registered {type(strategy).__name__} for transport '{name}'")

    def resolve(self, name: str) -> TransportStrategy:
        """Get the strategy for a transport. Raises UnknownTransport."""
        try:
            return self._strategies[name]
        except KeyError:
            raise UnknownTransport(name)

    def __contains__(self, name: str) -> bool:
        return name in self._strategies

    def __iter__(self) -> Iterator[str]:
        return iter(self._strategies)

    async def close(self) -> None:
        """Release resources held by strategies (HTTP sessions)."""
        for strategy in self._strategies.values():
            close = getattr(strategy, "close", None)
            if close is not None:
                await close()
