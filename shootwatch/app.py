"""Application bootstrap for shootwatch.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: logging → metrics → shoot observer (readiness barrier)
              → snapshot store → notifier → poller

Shutdown is cooperative: a signal sets the stop event, the poller finishes
its current cycle, and components are closed in reverse startup order.
"""

from __future__ import annotations

import asyncio
import signal

from shootwatch.errors import ObservationError
from shootwatch.models.config import ShootwatchConfig
from shootwatch.notifications import build_notifier
from shootwatch.notifications.manager import Notifier
from shootwatch.observability.logging import get_logger, setup_logging
from shootwatch.observability.metrics import start_metrics_server
from shootwatch.observer.shoots import ShootObserver
from shootwatch.poller import Poller
from shootwatch.snapshot.store import SnapshotStore

_SHUTDOWN_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGTERM, signal.SIGQUIT)


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class ShootwatchApp:
    """Application root. Owns every component and coordinates their lifecycle.

    ``stop()`` is safe to call on an app that was never started.
    """

    def __init__(self, config: ShootwatchConfig, observer: ShootObserver | None = None) -> None:
        self.config = config
        self.stop_event = asyncio.Event()
        self._observer = observer
        self._store: SnapshotStore | None = None
        self._notifier: Notifier | None = None
        self._poller: Poller | None = None
        self._log = get_logger("app")

    @property
    def poller(self) -> Poller | None:
        return self._poller

    async def start(self) -> None:
        """Start all components.

        Raises _ComponentError if a mandatory component cannot start.
        """
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("shootwatch starting", version=_shootwatch_version())

        self._start_metrics()
        await self._start_observer()
        self._start_store()
        self._start_notifier()

        assert self._observer is not None
        assert self._store is not None
        assert self._notifier is not None
        self._poller = Poller(
            observer=self._observer,
            store=self._store,
            notifier=self._notifier,
            interval=float(self.config.poll.interval_seconds),
        )
        self._log.info("shootwatch started", snapshot=self.config.snapshot.path)

    def _start_metrics(self) -> None:
        port = self.config.metrics.port
        if not port:
            self._log.debug("metrics exporter disabled")
            return
        try:
            start_metrics_server(port)
            self._log.info("metrics exporter started", port=port)
        except OSError as exc:
            # Metrics are optional; the poll loop runs without them.
            self._log.warning("metrics exporter failed to start", port=port, error=str(exc))

    async def _start_observer(self) -> None:
        if self._observer is None:
            self._observer = ShootObserver(
                kubeconfig_path=self.config.garden.kubeconfig_path,
                request_timeout=self.config.garden.request_timeout_seconds,
            )
        self._log.debug("waiting for shoot observer readiness")
        try:
            await self._observer.wait_ready()
        except ObservationError as exc:
            raise _ComponentError("observer", exc) from exc

    def _start_store(self) -> None:
        try:
            self._store = SnapshotStore(self.config.snapshot.path)
        except ValueError as exc:
            raise _ComponentError("snapshot_store", exc) from exc

    def _start_notifier(self) -> None:
        try:
            self._notifier = build_notifier(self.config.notifications)
        except ValueError as exc:
            raise _ComponentError("notifier", exc) from exc

    async def run(self) -> None:
        """Run the poll loop until the stop event is set.

        Raises:
            ObservationError: the poll loop terminated on a listing failure.
        """
        assert self._poller is not None
        await self._poller.run(self.stop_event)

    def request_shutdown(self) -> None:
        if not self.stop_event.is_set():
            self._log.info("Received interrupt signal.")
            self.stop_event.set()

    async def stop(self) -> None:
        """Release resources in reverse startup order."""
        self.stop_event.set()
        if self._observer is not None:
            await self._observer.close()
        self._log.info("shootwatch stopped")


def _shootwatch_version() -> str:
    from shootwatch import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: ShootwatchConfig) -> None:
    """Create the app, register OS signals, run until shutdown is requested.

    Raises SystemExit(1) on a fatal startup or observation error.
    """
    app = ShootwatchApp(config)
    loop = asyncio.get_running_loop()
    for sig in _SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, app.request_shutdown)

    log = get_logger("app")
    try:
        await app.start()
        await app.run()
    except _ComponentError as exc:
        log.critical("fatal startup error", component=exc.component, error=str(exc.cause))
        raise SystemExit(1) from exc
    except ObservationError as exc:
        log.critical("fatal observation error", error=str(exc))
        raise SystemExit(1) from exc
    finally:
        await app.stop()
        for sig in _SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)
