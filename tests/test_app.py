"""Tests for the application controller."""

import asyncio
import signal
import unittest
from unittest.mock import patch

from linkfixer import app as app_module
from linkfixer.app import LinkFixerApp, has_desktop_shell

from test_base import AsyncTestCase, FakeClipboard, FakeTray, make_config


class TestLinkFixerApp(AsyncTestCase):
    def make_app(self, tray_factory=FakeTray, **env):
        self.clipboard = FakeClipboard('https://x.com/a')
        return LinkFixerApp(make_config(**env), clipboard=self.clipboard, tray_factory=tray_factory)

    def test_headless_run_rewrites_and_exits_cleanly(self):
        app = self.make_app()

        async def scenario():
            task = asyncio.ensure_future(app.run())
            await self.wait_for_condition(lambda: self.clipboard.writes)
            app.exit()
            return await task

        self.assertEqual(self.run_async_test(scenario()), 0)
        self.assertEqual(self.clipboard.writes, ['https://fixupx.com/a'])
        self.assertIsNone(app.tray)

    def test_exit_runs_once(self):
        app = self.make_app(LINKFIXER_NO_TRAY='')

        async def scenario():
            with patch.object(app_module, 'has_desktop_shell', return_value=True):
                task = asyncio.ensure_future(app.run())
                await self.wait_for_condition(lambda: app.tray is not None)
            app.exit()
            app.exit()
            app._on_signal(signal.SIGTERM)
            return await task

        with self.assertLogs('linkfixer.app', level='INFO') as logs:
            self.assertEqual(self.run_async_test(scenario()), 0)
        self.assertEqual(app.tray.stopped, 1)
        self.assertEqual(sum('Exiting application' in line for line in logs.output), 1)

    def test_tray_actions_are_marshalled_to_loop(self):
        app = self.make_app(LINKFIXER_NO_TRAY='')

        async def scenario():
            with patch.object(app_module, 'has_desktop_shell', return_value=True):
                task = asyncio.ensure_future(app.run())
                await self.wait_for_condition(lambda: app.tray is not None)
            tray = app.tray
            tray.on_toggle()
            await self.wait_for_condition(lambda: not app.state.enabled)
            self.assertEqual(tray.calls, [False])
            tray.on_quit()
            return await task

        self.assertEqual(self.run_async_test(scenario()), 0)
        self.assertFalse(app.state.enabled)

    def test_tray_failure_keeps_monitoring(self):
        def broken_tray(**kwargs):
            raise RuntimeError('no tray available')

        app = self.make_app(tray_factory=broken_tray, LINKFIXER_NO_TRAY='')

        async def scenario():
            with patch.object(app_module, 'has_desktop_shell', return_value=True):
                task = asyncio.ensure_future(app.run())
                await self.wait_for_condition(lambda: self.clipboard.writes)
            app.exit()
            return await task

        with self.assertLogs('linkfixer.app', level='WARNING'):
            self.assertEqual(self.run_async_test(scenario()), 0)
        self.assertIsNone(app.tray)
        self.assertEqual(self.clipboard.writes, ['https://fixupx.com/a'])

    def test_disabled_rules_from_config(self):
        app = self.make_app(LINKFIXER_DISABLED_RULES='twitter')
        self.assertEqual([rule.name for rule in app.engine.rules], ['instagram', 'tiktok'])
        self.assertEqual(app.state.polling_interval_ms, 10)


class TestDesktopShell(unittest.TestCase):
    def test_platforms(self):
        self.assertTrue(has_desktop_shell('win32', {}))
        self.assertTrue(has_desktop_shell('linux', {'DISPLAY': ':0'}))
        self.assertTrue(has_desktop_shell('linux', {'WAYLAND_DISPLAY': 'wayland-0'}))
        self.assertFalse(has_desktop_shell('linux', {}))
        self.assertFalse(has_desktop_shell('darwin', {}))


if __name__ == '__main__':
    unittest.main()
