import queue
import threading

from nvgrid.batcher import DrawCommandBatcher


def test_batch_holds_queued_commands_in_order():
    out = queue.Queue()
    batcher = DrawCommandBatcher(out)
    batcher.queue("a")
    batcher.queue("b")
    batcher.queue("c")
    batcher.send_batch()
    assert out.get_nowait() == ["a", "b", "c"]
    assert out.empty()


def test_second_batch_is_empty_after_drain():
    out = queue.Queue()
    batcher = DrawCommandBatcher(out)
    batcher.queue(1)
    batcher.send_batch()
    batcher.send_batch()
    assert out.get_nowait() == [1]
    assert out.get_nowait() == []


def test_batches_are_separate():
    out = queue.Queue()
    batcher = DrawCommandBatcher(out)
    batcher.queue("first")
    batcher.send_batch()
    batcher.queue("second")
    batcher.send_batch()
    assert [out.get_nowait(), out.get_nowait()] == [["first"], ["second"]]


def test_queue_from_many_threads_loses_nothing():
    out = queue.Queue()
    batcher = DrawCommandBatcher(out)

    def worker(start):
        for value in range(start, start + 100):
            batcher.queue(value)

    threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    batcher.send_batch()
    assert sorted(out.get_nowait()) == list(range(400))