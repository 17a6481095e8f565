from __future__ import annotations

import threading

from mltestor.ui.dispatch import MainThreadDispatcher


def test_drain_runs_callbacks_in_order_on_calling_thread() -> None:
    dispatcher = MainThreadDispatcher()
    seen: list = []

    def worker(n: int) -> None:
        dispatcher.post(lambda: seen.append((n, threading.current_thread().name)))

    for n in range(3):
        t = threading.Thread(target=worker, args=(n,))
        t.start()
        t.join()

    assert seen == []
    assert dispatcher.drain() == 3
    main = threading.current_thread().name
    assert seen == [(0, main), (1, main), (2, main)]
    assert dispatcher.drain() == 0
