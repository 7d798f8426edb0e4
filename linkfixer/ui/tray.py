"""
System tray icon for Link Fixer.
"""
import logging

import pystray

from .icons import make_icon

logger = logging.getLogger(__name__)


class TrayIcon:
    def __init__(self, on_toggle, on_quit, enabled: bool = True):
        self._on_toggle = on_toggle
        self._on_quit = on_quit
        self._enabled = enabled
        self._icon: pystray.Icon | None = None

    def run(self):
        menu = pystray.Menu(
            pystray.MenuItem('Link Fixer', None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem('Enable Monitoring', self._toggle,
                             checked=lambda item: self._enabled, default=True),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem('Exit', self._quit),
        )
        self._icon = pystray.Icon('LinkFixer', make_icon(self._enabled), self._title(), menu=menu)
        self._icon.run()

    def stop(self):
        if self._icon:
            self._icon.stop()

    def set_indicator(self, enabled: bool):
        self._enabled = enabled
        if self._icon is None:
            return
        self._icon.icon = make_icon(enabled)
        self._icon.title = self._title()
        self._icon.update_menu()

    def _title(self):
        return f'Link Fixer ({"enabled" if self._enabled else "disabled"})'

    def _toggle(self, *_):
        self._on_toggle()

    def _quit(self, *_):
        self._on_quit()
