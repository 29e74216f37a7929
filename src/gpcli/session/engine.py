"""Measurement session engine.

Drives one-shot and infinite (continuous) measurement runs on top of the
session history and the polling window.

Infinite mode keeps up to `window_size` measurements in flight. Each round
polls every outstanding measurement once, in the order they were started,
renders whatever came back and, once an outstanding measurement has some
probes finished, starts the next one re-targeted at the probes of the most
recent measurement. Creation calls are rate limited to one round per
`api_min_interval` seconds.

Every created measurement is appended to the session store, so later
invocations can refer back to it. A failed write is a warning, shown once.

Cancellation is cooperative: the event is checked at round boundaries and
before starting new measurements, so polls and renders already underway
always complete.
"""

from __future__ import annotations

import asyncio
import signal
import types
from typing import Callable, Optional

import click
from loguru import logger

from gpcli.types import (
    ClientError,
    Clock,
    Config,
    Locations,
    MeasurementClient,
    MeasurementCreate,
    MeasurementCreateResponse,
    MeasurementStatus,
    Renderer,
    SessionStoreProtocol,
    ValidationError,
)
from gpcli.util import SystemClock

from .history import HistoryBuffer, HistoryItem, is_history_reference
from .store import SessionStore
from .window import PollingWindow

# ----------------
# Available States
# ----------------

ENGINE_STATE = types.SimpleNamespace()
ENGINE_STATE.IDLE = "IDLE"
ENGINE_STATE.RUNNING = "RUNNING"
ENGINE_STATE.CANCELLING = "CANCELLING"
ENGINE_STATE.STOPPED = "STOPPED"


def _print_warning(msg: str) -> None:
    click.echo(f"Warning: {msg}", err=True)


class SessionEngine:
    def __init__(
        self,
        config: Config,
        client: MeasurementClient,
        viewer: Renderer,
        clock: Optional[Clock] = None,
        store: Optional[SessionStoreProtocol] = None,
        history: Optional[HistoryBuffer] = None,
        warn: Callable[[str], None] = _print_warning,
    ):
        self.config = config
        self.client = client
        self.viewer = viewer
        self.clock = clock if clock is not None else SystemClock()
        self.store = store if store is not None else SessionStore(config.session_dir)
        self.history = (
            history if history is not None else HistoryBuffer(config.history_size)
        )
        self.warn = warn
        self.state = ENGINE_STATE.IDLE
        self.window: Optional[PollingWindow] = None
        self.measurements_created = 0
        self._store_warned = False

    def _set_state(self, state: str) -> None:
        if state != self.state:
            logger.debug("Engine state: {} -> {}", self.state, state)
        self.state = state

    # ------------------------------------------------------------------------------
    # Locations & history
    # ------------------------------------------------------------------------------

    def resolve_reference(self, reference: str) -> HistoryItem:
        """Resolve a history reference, loading the persisted session if needed.

        Raises InvalidIndex, IndexOutOfRange or NoPreviousMeasurements.
        """
        if self.history.index == 0:
            ids = self.store.load_ids()
            if ids:
                logger.debug("Loaded {} measurement(s) from session", len(ids))
            self.history.extend(
                HistoryItem(id=mid, status=MeasurementStatus.FINISHED) for mid in ids
            )
        return self.history.resolve(reference)

    def get_locations(self) -> list[Locations]:
        """Locations for the `from` clause of the current command.

        A single history reference resolves to the id of that measurement (the
        API reuses its probes); anything else is a comma-separated list of
        location selectors.
        """
        parts = [p.strip() for p in self.config.from_.split(",")]
        parts = [p for p in parts if p]
        if not parts:
            return [Locations(magic="world")]
        if len(parts) == 1 and is_history_reference(parts[0]):
            item = self.resolve_reference(parts[0])
            return [Locations(magic=item.id)]
        return [Locations(magic=p) for p in parts]

    # ------------------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------------------

    def create_measurement(self, opts: MeasurementCreate) -> HistoryItem:
        """Create a measurement and record it. Raises ClientError."""
        res, show_help, err = self.client.create_measurement(opts)
        return self._record_created(res, show_help, err)

    async def _create_measurement_async(self, opts: MeasurementCreate) -> HistoryItem:
        res, show_help, err = await asyncio.to_thread(
            self.client.create_measurement, opts
        )
        return self._record_created(res, show_help, err)

    def _record_created(
        self,
        res: Optional[MeasurementCreateResponse],
        show_help: bool,
        err: Optional[Exception],
    ) -> HistoryItem:
        if err is not None:
            if isinstance(err, ClientError):
                raise err
            raise ClientError(str(err), show_help=show_help) from err
        self.measurements_created += 1
        item = HistoryItem(
            id=res.id,
            status=MeasurementStatus.IN_PROGRESS,
            started_at=self.clock.utcnow(),
        )
        self.history.push(item)
        logger.info("Created measurement {} ({} probes)", res.id, res.probes_count)
        try:
            self.store.append_id(res.id)
        except OSError as e:
            logger.warning("Could not save measurement id to session: {}", e)
            if not self._store_warned:
                self._store_warned = True
                self.warn(str(e))
        return item

    # ------------------------------------------------------------------------------
    # One-shot
    # ------------------------------------------------------------------------------

    def run_once(self, opts: MeasurementCreate) -> HistoryItem:
        """Create a single measurement and render it."""
        opts.locations = self.get_locations()
        item = self.create_measurement(opts)
        self.viewer.output(item.id, opts)
        return item

    # ------------------------------------------------------------------------------
    # Infinite
    # ------------------------------------------------------------------------------

    async def run_infinite(
        self, opts: MeasurementCreate, cancel: Optional[asyncio.Event] = None
    ) -> None:
        """Run continuous measurements until `cancel` is set.

        Renders a summary on clean cancellation. Errors take precedence over
        cancellation and are raised without a summary.
        """
        limit = self.config.infinite_probe_limit
        if opts.limit > limit:
            raise ValidationError(
                f"continuous mode is currently limited to {limit} probes"
            )
        if cancel is None:
            cancel = asyncio.Event()

        opts.locations = self.get_locations()
        self._set_state(ENGINE_STATE.RUNNING)
        try:
            await self._run_rounds(opts, cancel)
            self.viewer.output_summary()
        finally:
            self._set_state(ENGINE_STATE.STOPPED)

    def _check_cancel(self, cancel: asyncio.Event) -> bool:
        if cancel.is_set():
            self._set_state(ENGINE_STATE.CANCELLING)
            return True
        return False

    async def _run_rounds(self, opts: MeasurementCreate, cancel: asyncio.Event):
        run_err: Optional[ClientError] = None
        window = PollingWindow(self.config.window_size)
        self.window = window

        while True:
            if self._check_cancel(cancel):
                if run_err is not None:
                    raise run_err
                logger.info("Cancelled with {} measurement(s) in flight", len(window))
                return

            window.restart()
            elapsed = 0.0
            el = window.next()
            while el is not None:
                m = await asyncio.to_thread(self.client.get_measurement, el.id)
                if not m.results:
                    el = window.next()
                    continue
                el.update(m)
                self.viewer.output_infinite(m)
                if el.status.terminal:
                    window.remove(el)

                if (
                    run_err is None
                    and not self._check_cancel(cancel)
                    and window.can_append()
                ):
                    opts.locations = [Locations(magic=self.history.last().id)]
                    start = self.clock.now()
                    try:
                        window.append(await self._create_measurement_async(opts))
                    except ClientError as e:
                        logger.warning("Deferring creation error until drained: {}", e)
                        run_err = e
                    elapsed += self.clock.now() - start
                el = window.next()

            if len(window) > 0:
                delay = self.config.api_min_interval - elapsed
                if delay > 0:
                    await self._pause(delay, cancel)
                continue

            if run_err is not None:
                raise run_err
            if self._check_cancel(cancel):
                continue

            last = self.history.last()
            if last is not None:
                opts.locations = [Locations(magic=last.id)]
            window.append(await self._create_measurement_async(opts))

    async def _pause(self, seconds: float, cancel: asyncio.Event) -> None:
        """Sleep on the clock, waking early if cancelled."""
        sleeper = asyncio.ensure_future(self.clock.sleep(seconds))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            sleeper.cancel()
            waiter.cancel()


# ====================================================================================


def install_signal_relay(
    cancel: asyncio.Event, signals: tuple = (signal.SIGINT, signal.SIGTERM)
) -> Callable[[], None]:
    """Set `cancel` when any of `signals` arrives. Returns an uninstaller.

    Uses the running loop's signal handlers, or plain `signal.signal` where the
    loop does not support them (Windows).
    """
    loop = asyncio.get_running_loop()
    via_loop = []
    previous = {}

    def relay(signum, frame=None):
        logger.info("Received signal {}, stopping after this round", signum)
        loop.call_soon_threadsafe(cancel.set)

    for sig in signals:
        try:
            loop.add_signal_handler(sig, relay, sig)
            via_loop.append(sig)
        except (NotImplementedError, RuntimeError):
            previous[sig] = signal.signal(sig, relay)

    def uninstall():
        for sig in via_loop:
            loop.remove_signal_handler(sig)
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    return uninstall


async def run_until_signal(engine: SessionEngine, opts: MeasurementCreate) -> None:
    """Run infinite mode, cancelled by SIGINT/SIGTERM."""
    cancel = asyncio.Event()
    uninstall = install_signal_relay(cancel)
    try:
        await engine.run_infinite(opts, cancel)
    finally:
        uninstall()
