import os

import pytest

# Keep log output concise and deterministic regardless of the caller's shell.
os.environ.pop("DEBUG", None)

from tests.fixtures.irc_fixtures import FakeClock, FakeTransport  # noqa: E402
from twitchplay.config import ConnectionConfig  # noqa: E402
from twitchplay.irc import ConnectionWorker, Mailbox  # noqa: E402


@pytest.fixture
def config():
    return ConnectionConfig(auth_token="abc123", username="Tester", channel="#Bar", idle_sleep=0.25)


@pytest.fixture
def make_worker(config):
    """Build a worker wired to a scripted transport and a fake clock.

    Returns ``(worker, transport, clock)``; call ``worker.run()`` to drive it
    on the test thread.
    """

    def _make(script=(), *, transport=None, stop_when_idle=True, **overrides):
        cfg = config.model_copy(update=overrides) if overrides else config
        clock = FakeClock()
        worker = None

        def _stop():
            worker.request_stop()

        fake = transport or FakeTransport(script, on_idle=_stop if stop_when_idle else None)
        worker = ConnectionWorker(
            cfg,
            Mailbox(),
            transport_factory=lambda _cfg: fake,
            sleep=clock.sleep,
            clock=clock,
        )
        return worker, fake, clock

    return _make
