import threading

from twitchplay.irc.mailbox import Mailbox, SpscQueue
from twitchplay.irc.models import ChatMessage


def test_queue_is_fifo():
    q: SpscQueue[int] = SpscQueue()
    for i in range(100):
        q.put(i)
    assert len(q) == 100
    assert q.get_one() == 0
    assert q.drain() == list(range(1, 100))
    assert q.empty()


def test_empty_queue_never_blocks():
    q: SpscQueue[str] = SpscQueue()
    assert q.get_one() is None
    assert q.drain() == []


def test_cross_thread_delivery_has_no_loss_or_duplication():
    q: SpscQueue[int] = SpscQueue()
    total = 20_000

    def produce():
        for i in range(total):
            q.put(i)

    producer = threading.Thread(target=produce)
    producer.start()
    received: list[int] = []
    while len(received) < total:
        received.extend(q.drain())
        if not producer.is_alive() and q.empty() and len(received) < total:
            break
    producer.join()
    received.extend(q.drain())
    assert received == list(range(total))


def test_mailbox_flattens_message_batches():
    box = Mailbox()
    box.inbound.put([ChatMessage("a", "1"), ChatMessage("b", "2")])
    box.inbound.put([ChatMessage("c", "3")])
    assert [m.text for m in box.drain_messages()] == ["1", "2", "3"]
    assert box.drain_messages() == []


def test_mailbox_queues_are_independent():
    first, second = Mailbox(), Mailbox()
    first.status.put("x")
    assert second.status.empty()
