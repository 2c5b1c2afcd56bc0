"""
Countdown timer for answering a question.
"""

import asyncio
import logging
from typing import Callable, Optional

from interview_coach.core.constants import DEFAULT_ANSWER_SECONDS

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """Render seconds as zero-padded MM:SS."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class CountdownTimer:
    """
    Seconds countdown that stops itself at zero.

    tick() can be driven manually; when started inside a running event loop
    a background task calls it once per second.
    """

    def __init__(
        self,
        initial_seconds: int = DEFAULT_ANSWER_SECONDS,
        on_tick: Optional[Callable[[int], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
        interval: float = 1.0
    ):
        self.time = initial_seconds
        self.is_active = False
        self.on_tick = on_tick
        self.on_expire = on_expire
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def formatted_time(self) -> str:
        return format_time(self.time)

    def start(self) -> None:
        if self.time <= 0:
            return
        self.is_active = True
        self._ensure_driver()

    def stop(self) -> None:
        self.is_active = False
        self._cancel_driver()

    def reset(self, new_seconds: int) -> None:
        self._cancel_driver()
        self.time = new_seconds
        self.is_active = False

    def tick(self) -> None:
        """Advance one second; inactive timers are unaffected."""
        if not self.is_active:
            return

        if self.time <= 1:
            self.time = 0
            self.is_active = False
            logger.debug("Countdown expired")
            if self.on_tick:
                self.on_tick(self.time)
            if self.on_expire:
                self.on_expire()
            return

        self.time -= 1
        if self.on_tick:
            self.on_tick(self.time)

    def close(self) -> None:
        self.stop()

    async def run(self) -> None:
        """Tick once per interval until the countdown stops or expires."""
        while self.is_active:
            await asyncio.sleep(self.interval)
            self.tick()

    def _ensure_driver(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the caller drives tick() itself
            return
        if self._task is None or self._task.done():
            self._task = loop.create_task(self.run())

    def _cancel_driver(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
