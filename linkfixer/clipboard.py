"""
Platform clipboard access.

Each backend shells out to the system's clipboard utility and is selected once
at startup by ``select_backend``. All calls are bounded by a timeout; a child
process that overruns or whose caller is cancelled is killed and reaped.
"""
import asyncio
import logging
import os
import shutil
import sys

import pyperclip

from .errors import ReadError, WriteError

logger = logging.getLogger(__name__)


class ClipboardBackend:
    """Reads and writes plain text on the system clipboard."""

    name = 'base'

    async def read(self) -> str:
        raise NotImplementedError

    async def write(self, text: str) -> bool:
        raise NotImplementedError


class CommandClipboard(ClipboardBackend):
    """Clipboard backed by a pair of paste/copy command lines."""

    read_command: tuple[str, ...] = ()
    write_command: tuple[str, ...] = ()
    # Utilities that fork to keep owning the selection would hold our pipes
    # open, so their output is discarded instead of captured.
    write_forks = False

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout

    def _env(self):
        return None

    async def read(self) -> str:
        try:
            stdout, _ = await self._run(self.read_command)
        except (OSError, asyncio.TimeoutError, CommandFailed) as e:
            raise ReadError(f'{self.name}: clipboard read failed', e)
        return stdout.decode('utf-8', errors='replace').rstrip()

    async def write(self, text: str) -> bool:
        try:
            await self._run(self.write_command, text.encode('utf-8'), capture=not self.write_forks)
        except (OSError, asyncio.TimeoutError, CommandFailed) as e:
            raise WriteError(f'{self.name}: clipboard write failed', e)
        return True

    async def _run(self, argv, data: bytes | None = None, capture: bool = True):
        output = asyncio.subprocess.PIPE if capture else asyncio.subprocess.DEVNULL
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE if data is not None else asyncio.subprocess.DEVNULL,
            stdout=output,
            stderr=output,
            env=self._env(),
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(data), self.timeout)
        finally:
            if proc.returncode is None:
                await _reap(proc)

        if proc.returncode != 0:
            detail = (stderr or b'').decode('utf-8', errors='replace').strip()
            raise CommandFailed(f'{argv[0]} exited with status {proc.returncode}: {detail}')
        return stdout or b'', stderr or b''


class CommandFailed(Exception):
    """A clipboard utility exited with a non-zero status."""
    pass


async def _reap(proc):
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await asyncio.shield(proc.wait())
    logger.debug('Killed clipboard helper pid %s', proc.pid)


class WindowsClipboard(CommandClipboard):
    name = 'windows'
    read_command = (
        'powershell.exe', '-NoProfile', '-NonInteractive', '-Command',
        '[Console]::OutputEncoding = [Text.Encoding]::UTF8; Get-Clipboard -Raw',
    )
    write_command = (
        'powershell.exe', '-NoProfile', '-NonInteractive', '-Command',
        '[Console]::InputEncoding = [Text.Encoding]::UTF8; '
        'Set-Clipboard -Value ([Console]::In.ReadToEnd())',
    )


class MacClipboard(CommandClipboard):
    name = 'macos'
    read_command = ('pbpaste',)
    write_command = ('pbcopy',)

    def _env(self):
        # pbcopy/pbpaste only speak UTF-8 when the locale says so
        return {**os.environ, 'LANG': 'en_US.UTF-8'}


class WaylandClipboard(CommandClipboard):
    name = 'wayland'
    read_command = ('wl-paste', '--no-newline', '--type', 'text/plain')
    write_command = ('wl-copy', '--type', 'text/plain;charset=utf-8')
    write_forks = True


class XclipClipboard(CommandClipboard):
    name = 'xclip'
    read_command = ('xclip', '-selection', 'clipboard', '-o')
    write_command = ('xclip', '-selection', 'clipboard', '-i')
    write_forks = True


class XselClipboard(CommandClipboard):
    name = 'xsel'
    read_command = ('xsel', '--clipboard', '--output')
    write_command = ('xsel', '--clipboard', '--input')
    write_forks = True


class PyperclipClipboard(ClipboardBackend):
    """Fallback through pyperclip, run in a worker thread."""

    name = 'pyperclip'

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout

    async def read(self) -> str:
        try:
            text = await asyncio.wait_for(asyncio.to_thread(pyperclip.paste), self.timeout)
        except (pyperclip.PyperclipException, OSError, asyncio.TimeoutError) as e:
            raise ReadError('pyperclip: clipboard read failed', e)
        return (text or '').rstrip()

    async def write(self, text: str) -> bool:
        try:
            await asyncio.wait_for(asyncio.to_thread(pyperclip.copy, text), self.timeout)
        except (pyperclip.PyperclipException, OSError, asyncio.TimeoutError) as e:
            raise WriteError('pyperclip: clipboard write failed', e)
        return True


class UnsupportedClipboard(ClipboardBackend):
    name = 'unsupported'

    def __init__(self, reason: str):
        self.reason = reason

    async def read(self) -> str:
        raise ReadError(f'clipboard unsupported: {self.reason}')

    async def write(self, text: str) -> bool:
        raise WriteError(f'clipboard unsupported: {self.reason}')


BACKENDS = {
    cls.name: cls
    for cls in (WindowsClipboard, MacClipboard, WaylandClipboard, XclipClipboard,
                XselClipboard, PyperclipClipboard)
}


def select_backend(preferred: str = 'auto', timeout: float = 2.0,
                   platform: str | None = None, environ=None) -> ClipboardBackend:
    """Pick the clipboard backend for this platform."""
    if preferred != 'auto':
        return BACKENDS[preferred](timeout)

    platform = platform or sys.platform
    env = os.environ if environ is None else environ

    if platform == 'win32':
        return WindowsClipboard(timeout)
    if platform == 'darwin':
        return MacClipboard(timeout)
    if platform.startswith('linux') or 'bsd' in platform:
        if env.get('WAYLAND_DISPLAY') and shutil.which('wl-paste') and shutil.which('wl-copy'):
            return WaylandClipboard(timeout)
        if shutil.which('xclip'):
            return XclipClipboard(timeout)
        if shutil.which('xsel'):
            return XselClipboard(timeout)
        logger.warning('No clipboard utility found (wl-clipboard, xclip or xsel); falling back to pyperclip')
        return PyperclipClipboard(timeout)
    return UnsupportedClipboard(f'platform {platform!r}')
