import queue
from typing import Callable


class MainThreadDispatcher:
    """Hands callbacks from worker threads to the UI thread.

    Workers call ``post``; the UI thread calls ``drain`` whenever it is
    ready to apply updates. Callbacks run in the order they were posted.
    """

    def __init__(self):
        self._pending: "queue.SimpleQueue[Callable[[], None]]" = queue.SimpleQueue()

    def post(self, callback: Callable[[], None]) -> None:
        self._pending.put(callback)

    def pending(self) -> int:
        return self._pending.qsize()

    def drain(self) -> int:
        ran = 0
        while True:
            try:
                callback = self._pending.get_nowait()
            except queue.Empty:
                return ran
            callback()
            ran += 1
