from typing import Callable, List


class ScheduledTask:
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.done = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)


class TickScheduler:
    """
    Delayed callbacks driven by the caller's frame tick.

    Nothing runs on its own: ``update(delta_sec)`` moves the clock forward and
    fires every task that has come due, in due order, on the calling thread.
    Any object with a compatible ``call_later`` (an asyncio loop, say) can
    stand in for it.
    """

    def __init__(self):
        self.now = 0.0
        self._tasks: List[ScheduledTask] = []

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(self.now + max(0.0, float(delay_sec)), callback)
        self._tasks.append(task)
        return task

    def update(self, delta_sec: float) -> int:
        """Advance by ``delta_sec`` and run due tasks. Returns how many ran."""
        self.now += max(0.0, float(delta_sec))
        ran = 0
        while True:
            due = [t for t in self._tasks if t.pending and t.due <= self.now]
            if not due:
                break
            task = min(due, key=lambda t: t.due)
            task.done = True
            task.callback()
            ran += 1
        self._tasks = [t for t in self._tasks if t.pending]
        return ran

    @property
    def pending(self) -> int:
        return sum(1 for t in self._tasks if t.pending)
