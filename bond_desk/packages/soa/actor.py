"""
Service actor - single-consumer FIFO inbox for a service entry point
Used by the concurrent runtime so independent pipelines interleave while each
service still sees its input strictly in order
"""

import asyncio
import logging
import time
from collections import deque
from typing import Any, Callable, Dict, Optional

from .service import ServiceListener

logger = logging.getLogger(__name__)


class ServiceActor:
    """
    Wraps one inbound handler in an asyncio task draining an unbounded queue
    """

    def __init__(self, name: str, handler: Callable[[Any], None]):
        """
        Args:
            name: actor name used in logs
            handler: service entry point called once per event
        """
        self.name = name
        self.handler = handler

        self.queue: Optional[asyncio.Queue] = None
        self.processor_task: Optional[asyncio.Task] = None
        self.running = False

        self.stats = {
            'events_submitted': 0,
            'events_processed': 0,
            'handler_errors': 0,
            'max_queue_depth': 0,
            'avg_latency_ms': 0.0,
        }
        self.latency_samples = deque(maxlen=100)

    def submit(self, event: Any) -> None:
        """Enqueue an event; requires a started actor"""
        if self.queue is None:
            raise RuntimeError(f"[{self.name}] actor not started")
        self.queue.put_nowait((time.monotonic(), event))
        self.stats['events_submitted'] += 1
        depth = self.queue.qsize()
        if depth > self.stats['max_queue_depth']:
            self.stats['max_queue_depth'] = depth

    async def _process_events(self) -> None:
        logger.debug(f"[{self.name}] processor started")
        while True:
            enqueued_at, event = await self.queue.get()
            try:
                self.handler(event)
                self.stats['events_processed'] += 1
            except Exception as e:
                self.stats['handler_errors'] += 1
                logger.exception(f"[{self.name}] handler failed: {e}")
            finally:
                self.latency_samples.append((time.monotonic() - enqueued_at) * 1000)
                self.queue.task_done()
            # let sibling actors run between events
            await asyncio.sleep(0)

    async def start(self) -> None:
        if self.running:
            logger.warning(f"[{self.name}] already running")
            return
        self.queue = asyncio.Queue()
        self.running = True
        self.processor_task = asyncio.create_task(self._process_events(), name=self.name)

    async def join(self) -> None:
        """Wait until every event submitted so far has been handled"""
        if self.queue is not None:
            await self.queue.join()

    @property
    def idle(self) -> bool:
        done = self.stats['events_processed'] + self.stats['handler_errors']
        return self.stats['events_submitted'] == done

    async def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self.processor_task.cancel()
        try:
            await self.processor_task
        except asyncio.CancelledError:
            pass
        self.processor_task = None
        logger.debug(f"[{self.name}] stopped")

    def get_stats(self) -> Dict[str, Any]:
        if self.latency_samples:
            self.stats['avg_latency_ms'] = sum(self.latency_samples) / len(self.latency_samples)
        return {
            **self.stats,
            'queue_size': self.queue.qsize() if self.queue is not None else 0,
        }


class ActorListener(ServiceListener):
    """Listener that turns a notify() hop into a send to another actor"""

    def __init__(self, actor: ServiceActor):
        self.actor = actor

    def process_add(self, data) -> None:
        self.actor.submit(data)

    def __repr__(self) -> str:
        return f"ActorListener({self.actor.name})"
