"""
In-process publish/subscribe for chat messages, keyed by conversation id.

Each open WebSocket holds one subscription for the conversation it is
viewing. Subscriptions must be released when the socket closes.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)


class ConversationBroker:
    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscribers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)

    def subscribe(self, conversation_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers[conversation_id].add(queue)
        return queue

    def unsubscribe(self, conversation_id: str, queue: asyncio.Queue) -> None:
        subscribers = self._subscribers.get(conversation_id)
        if not subscribers:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[conversation_id]

    def publish(self, conversation_id: str, event: Dict[str, Any]) -> int:
        """Push an event to every subscriber of a conversation, returning how many got it."""
        delivered = 0
        for queue in list(self._subscribers.get(conversation_id, ())):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                # Slow consumer; it will resync from the message history
                logger.warning(f"Dropping chat event for a slow subscriber of {conversation_id}")
        return delivered

    def subscriber_count(self, conversation_id: str) -> int:
        return len(self._subscribers.get(conversation_id, ()))


broker = ConversationBroker()
