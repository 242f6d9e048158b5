"""In-process publish/subscribe hub for realtime message push."""

import itertools
import logging
import threading
from typing import Any, Callable, Dict

logger = logging.getLogger("dogoods.realtime")

Callback = Callable[[Dict[str, Any]], None]


def message_channel(conversation_id) -> str:
    return f"messages_{conversation_id}"


class RealtimeHub:
    """
    Channel based fan-out. Publishers run in the request threadpool,
    subscribers are usually WebSocket handlers bridging into their event loop.
    A subscriber callback that raises is logged and skipped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._channels: Dict[str, Dict[int, Callback]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, channel: str, callback: Callback) -> int:
        with self._lock:
            token = next(self._ids)
            self._channels.setdefault(channel, {})[token] = callback
        logger.debug("Subscribed token=%d channel=%s", token, channel)
        return token

    def unsubscribe(self, channel: str, token: int) -> None:
        with self._lock:
            subscribers = self._channels.get(channel)
            if not subscribers:
                return
            subscribers.pop(token, None)
            if not subscribers:
                del self._channels[channel]

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._channels.get(channel, {}))

    def publish(self, channel: str, payload: Dict[str, Any]) -> int:
        """Deliver ``payload`` to every subscriber; returns the delivery count"""
        with self._lock:
            callbacks = list(self._channels.get(channel, {}).values())

        delivered = 0
        for callback in callbacks:
            try:
                callback(payload)
                delivered += 1
            except Exception:
                logger.exception("Realtime subscriber failed on channel %s", channel)
        return delivered


hub = RealtimeHub()
