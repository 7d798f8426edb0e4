"""
Main application controller for Link Fixer.
Coordinates configuration, clipboard monitoring, signals, and the tray.
"""
import asyncio
import logging
import os
import signal
import sys
import threading

from .clipboard import select_backend
from .clipboard_monitor import ClipboardLoop
from .config import Config
from .errors import LinkFixerError
from .rewrite import RewriteEngine
from .state import MonitorState

logger = logging.getLogger(__name__)


def _default_tray_factory(on_toggle, on_quit, enabled):
    from .ui.tray import TrayIcon
    return TrayIcon(on_toggle, on_quit, enabled)


def has_desktop_shell(platform=None, environ=None) -> bool:
    platform = platform or sys.platform
    env = os.environ if environ is None else environ
    if platform == 'win32':
        return True
    if platform.startswith('linux'):
        return bool(env.get('DISPLAY') or env.get('WAYLAND_DISPLAY'))
    # pystray needs the main thread on macOS, which asyncio owns here
    return False


class LinkFixerApp:
    def __init__(self, config=None, clipboard=None, tray_factory=_default_tray_factory):
        self.config = config or Config()
        self.state = MonitorState(polling_interval_ms=self.config.poll_interval_ms)
        self.engine = RewriteEngine.with_defaults(self.config.disabled_rules)
        self.clipboard = clipboard or select_backend(self.config.backend, self.config.clipboard_timeout)
        self.monitor = ClipboardLoop(self.state, self.engine, self.clipboard)
        self.tray = None
        self._tray_factory = tray_factory
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stopped: asyncio.Event | None = None
        self._exiting = False

    # ── Lifecycle ──────────────────────────────────────────────────────────

    async def run(self) -> int:
        self._loop = asyncio.get_running_loop()
        self._stopped = asyncio.Event()
        logger.info('Starting clipboard monitor with %s clipboard...', self.clipboard.name)
        logger.info('Rules: %s', ', '.join(rule.name for rule in self.engine.rules) or 'none')

        self._install_signal_handlers()
        if self.config.tray_enabled and has_desktop_shell():
            self._start_tray()
        else:
            logger.info('Tray icon disabled or unavailable; running headless')

        self.monitor.start()
        logger.info('Press Ctrl+C to exit or use the tray icon')
        await self._stopped.wait()
        try:
            await self.monitor.stop()
        except Exception:
            logger.exception('Error while stopping clipboard monitor')
        return 0

    def exit(self):
        """Shut down once; later calls are ignored."""
        if self._exiting:
            return
        self._exiting = True
        logger.info('Exiting application')
        if self.tray is not None:
            try:
                self.tray.stop()
            except Exception:
                logger.exception('Error stopping tray icon')
        if self._stopped is not None:
            self._stopped.set()

    # ── Tray (actions arrive on the tray thread) ──────────────────────────

    def _start_tray(self):
        try:
            self.tray = self._tray_factory(
                on_toggle=lambda: self._loop.call_soon_threadsafe(self.monitor.toggle_monitoring),
                on_quit=lambda: self._loop.call_soon_threadsafe(self.exit),
                enabled=self.state.enabled,
            )
        except Exception:
            logger.warning('Failed to initialize tray; continuing headless', exc_info=True)
            self.tray = None
            return
        self.monitor.indicator = self.tray
        threading.Thread(target=self._run_tray, daemon=True, name='TrayIcon').start()
        logger.info('Tray icon initialized')

    def _run_tray(self):
        try:
            self.tray.run()
        except Exception:
            logger.warning('Tray icon stopped unexpectedly; continuing headless', exc_info=True)
            self._loop.call_soon_threadsafe(self._detach_tray)

    def _detach_tray(self):
        self.monitor.indicator = None
        self.tray = None

    # ── Signals ───────────────────────────────────────────────────────────

    def _install_signal_handlers(self):
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                self._loop.add_signal_handler(sig, self._on_signal, sig)
            except (NotImplementedError, RuntimeError):
                # Windows event loops have no add_signal_handler
                signal.signal(sig, lambda signum, _frame: self._loop.call_soon_threadsafe(self._on_signal, signum))

    def _on_signal(self, sig):
        logger.info('Received %s signal', signal.Signals(sig).name)
        self.exit()


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def main():
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    try:
        config = Config()
        logging.getLogger().setLevel(config.log_level)
        app = LinkFixerApp(config)
    except LinkFixerError as e:
        logger.error('Failed to start: %s', e)
        sys.exit(1)
    sys.exit(asyncio.run(app.run()))
