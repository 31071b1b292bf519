"""
MixerRouter - channel -> destination address bindings
Routing metadata only, no signal flow.

Provides:
- Last-writer-wins binding per channel id
- Running count of bind calls (rebinding a channel still counts)
- Ceiling on the number of distinct channels
"""

import logging
import threading
from typing import Dict, Optional

from . import constants as C

logger = logging.getLogger(__name__)


class MixerRouter:
    """
    Lock-protected channel binding table.

    A bind for a channel not yet in the table is dropped once max_channels
    distinct channels exist. Dropped binds do not touch the route counter.
    """

    def __init__(self, max_channels: int = C.MAX_CHANNELS):
        """
        Initialize the router.

        Args:
            max_channels: Maximum number of distinct channel ids
        """
        self.max_channels = max(1, int(max_channels))
        self._bindings: Dict[int, str] = {}
        self._route_count = 0
        self._lock = threading.Lock()

    def bind_channel(self, channel: int, destination: str) -> bool:
        """
        Bind a channel to a destination address, replacing any old binding.

        Returns:
            True if bound, False if the table is full of other channels
        """
        with self._lock:
            if channel not in self._bindings and len(self._bindings) >= self.max_channels:
                logger.debug("Cannot bind channel %s - at max capacity (%d)", channel, self.max_channels)
                return False
            self._bindings[channel] = destination
            self._route_count += 1
            return True

    def unbind_channel(self, channel: int) -> bool:
        with self._lock:
            return self._bindings.pop(channel, None) is not None

    def destination(self, channel: int) -> Optional[str]:
        with self._lock:
            return self._bindings.get(channel)

    def bindings(self) -> Dict[int, str]:
        with self._lock:
            return dict(self._bindings)

    @property
    def route_count(self) -> int:
        return self._route_count

    @property
    def channel_count(self) -> int:
        return len(self._bindings)
