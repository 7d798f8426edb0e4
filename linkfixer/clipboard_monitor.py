"""
Polls the clipboard and rewrites social-media links in place.
"""
import asyncio
import enum
import logging

from .errors import ReadError, WriteError

logger = logging.getLogger(__name__)


class LoopPhase(enum.Enum):
    IDLE = 'idle'
    READING = 'reading'
    PROCESSING = 'processing'
    WRITING_BACK = 'writing back'


class TickOutcome(enum.Enum):
    DISABLED = 'disabled'
    BUSY = 'busy'
    READ_FAILED = 'read failed'
    EMPTY = 'empty'
    UNCHANGED = 'unchanged'
    NO_MATCH = 'no match'
    REWRITTEN = 'rewritten'
    WRITE_FAILED = 'write failed'


class ClipboardLoop:
    def __init__(self, state, engine, clipboard, indicator=None):
        self.state = state
        self.engine = engine
        self.clipboard = clipboard
        self.indicator = indicator
        self.phase = LoopPhase.IDLE
        self._task: asyncio.Task | None = None
        self._busy = False

    @property
    def interval(self) -> float:
        return self.state.polling_interval_ms / 1000

    # ── Lifecycle ──────────────────────────────────────────────────────────

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name='ClipboardLoop')
            logger.info('Clipboard monitoring started (every %d ms)', self.state.polling_interval_ms)
        return self._task

    async def stop(self):
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info('Clipboard monitoring stopped')

    async def run(self):
        """Tick on a fixed period; periods missed by a slow tick are skipped."""
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while True:
            try:
                await self.tick()
            except Exception:
                logger.exception('Error in clipboard monitoring')
            deadline += self.interval
            now = loop.time()
            if deadline < now:
                skipped = int((now - deadline) // self.interval) + 1
                logger.debug('Tick overran, skipping %d period(s)', skipped)
                deadline += skipped * self.interval
            await asyncio.sleep(deadline - now)

    # ── Toggle ─────────────────────────────────────────────────────────────

    def toggle_monitoring(self):
        self.set_enabled(not self.state.enabled)

    def set_enabled(self, enabled: bool):
        self.state.enabled = enabled
        logger.info('Clipboard monitoring %s', 'enabled' if enabled else 'disabled')
        if self.indicator is not None:
            self.indicator.set_indicator(enabled)

    # ── Tick ───────────────────────────────────────────────────────────────

    async def tick(self) -> TickOutcome:
        if not self.state.enabled:
            return TickOutcome.DISABLED
        if self._busy:
            return TickOutcome.BUSY

        self._busy = True
        try:
            return await self._tick()
        finally:
            self._busy = False
            self.phase = LoopPhase.IDLE

    async def _tick(self) -> TickOutcome:
        self.phase = LoopPhase.READING
        try:
            content = await self.clipboard.read()
        except ReadError as e:
            logger.warning('Error reading clipboard: %s', e)
            return TickOutcome.READ_FAILED

        if not content:
            return TickOutcome.EMPTY
        if content == self.state.last_seen_text:
            return TickOutcome.UNCHANGED

        # Adopt the new content before transforming so a failure downstream
        # is not retried until the clipboard changes again.
        self.state.last_seen_text = content

        self.phase = LoopPhase.PROCESSING
        fixed = self.engine.apply(content)
        if fixed == content:
            return TickOutcome.NO_MATCH

        logger.info('Detected link! Replacing...')
        logger.info('Original: %s', content)
        logger.info('Fixed: %s', fixed)

        self.phase = LoopPhase.WRITING_BACK
        try:
            await self.clipboard.write(fixed)
        except WriteError as e:
            logger.error('Failed to update clipboard: %s', e)
            return TickOutcome.WRITE_FAILED

        self.state.last_seen_text = fixed
        return TickOutcome.REWRITTEN
