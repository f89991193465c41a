from dataclasses import dataclass

import pytest

from relaylog import context
from relaylog.formatters import ROUTER_ENCODER
from relaylog.router import Router
from relaylog.testing import MemorySink


@dataclass
class RouterStreams:
    router: Router
    main: MemorySink
    compilation: MemorySink
    detailed: MemorySink


@pytest.fixture(autouse=True)
def isolate_process_router(monkeypatch):
    """Every test starts without an installed process router."""
    monkeypatch.setattr(context, "_router", None)
    yield


@pytest.fixture
def router_streams() -> RouterStreams:
    """An isolated Router whose three streams render into memory."""
    router = Router()
    main = MemorySink(encoder=ROUTER_ENCODER, min_level="INFO")
    compilation = MemorySink(encoding="json", encoder=ROUTER_ENCODER)
    detailed = MemorySink(encoder=ROUTER_ENCODER)
    router.configure_main_for_test(main_sink=main, compilation_sink=compilation)
    router.configure_detailed_for_test(detailed)
    return RouterStreams(router, main, compilation, detailed)
