"""
Process-wide router lifecycle.

Applications build one Router at start-up, install it with ``init`` and
retrieve it with ``get_router``; ``shutdown`` flushes and closes it. Library
code that can take a Router argument should do so instead of reaching here.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .config import RelaylogSettings
from .exceptions import ConfigurationError
from .router import Router

logger = logging.getLogger(__name__)

_router: Router | None = None
_lock = threading.Lock()


def build_router(settings: RelaylogSettings | None = None) -> Router:
    """Build and configure a Router from settings (environment by default)."""
    settings = settings or RelaylogSettings()
    router = Router(
        main_level=settings.main_level.value,
        detailed_level=settings.detailed_level.value,
        **settings.console_options(),
    )
    router.configure_main(settings.directory, settings.name)
    if settings.detailed:
        try:
            router.configure_detailed(settings.directory, settings.name)
        except ConfigurationError:
            router.close()
            raise
    return router


def init(router: Router | RelaylogSettings | None = None) -> Router:
    """
    Install the process router.

    Args:
        router: A configured Router, or settings to build one from. Defaults
            to settings read from the environment.

    Raises:
        ConfigurationError: a router is already installed, or building failed.
    """
    global _router
    if _router is not None:
        raise ConfigurationError("relaylog is already initialized; call shutdown() first")
    owned = not isinstance(router, Router)
    candidate = build_router(router) if owned else router  # type: ignore[arg-type]
    with _lock:
        installed = _router is None
        if installed:
            _router = candidate
    if not installed:
        # Lost a race with another init(); release what was built here.
        if owned:
            candidate.close()
        raise ConfigurationError("relaylog is already initialized; call shutdown() first")
    logger.debug("router installed (%s)", candidate.state.value)
    return candidate


def get_router() -> Router:
    """Return the installed router."""
    router = _router
    if router is None:
        raise ConfigurationError("relaylog has not been initialized")
    return router


def shutdown() -> None:
    """Flush and close the installed router, then uninstall it.

    The router is uninstalled and closed even when flushing raises.
    """
    global _router
    with _lock:
        router, _router = _router, None
    if router is None:
        return
    try:
        router.flush()
    finally:
        router.close()
        logger.debug("router shut down")


@contextmanager
def use_router(router: Router) -> Iterator[Router]:
    """Temporarily install ``router``, restoring the previous one afterwards."""
    global _router
    with _lock:
        previous, _router = _router, router
    try:
        yield router
    finally:
        with _lock:
            _router = previous
