"""Tests for the session window event handling."""

from unittest.mock import MagicMock

import pygame

from recess.runtime.window import SessionWindow, WindowConfig


def key_event(key: int) -> MagicMock:
    return MagicMock(type=pygame.KEYDOWN, key=key)


class TestWindowConfig:
    def test_defaults(self) -> None:
        config = WindowConfig.from_dict({})
        assert config.resolution == (800, 600)
        assert config.fps == 30

    def test_from_dict(self) -> None:
        config = WindowConfig.from_dict({"resolution": [1024, 768], "fps": 60, "title": "Kids"})
        assert config == WindowConfig(resolution=(1024, 768), fps=60, title="Kids")


class TestSessionWindow:
    def test_quit_event_stops(self) -> None:
        window = SessionWindow(MagicMock(), MagicMock())
        assert not window.process_events([MagicMock(type=pygame.QUIT)])

    def test_escape_stops(self) -> None:
        window = SessionWindow(MagicMock(), MagicMock())
        assert not window.process_events([key_event(pygame.K_ESCAPE)])

    def test_input_events_reach_session(self) -> None:
        session = MagicMock()
        window = SessionWindow(session, MagicMock())
        motion = MagicMock(type=pygame.MOUSEMOTION)

        assert window.process_events([motion, key_event(pygame.K_a)])
        assert session.handle_event.call_count == 2
        session.handle_event.assert_any_call(motion)

    def test_f5_reloads_session(self) -> None:
        session = MagicMock()
        window = SessionWindow(session, MagicMock())

        assert window.process_events([key_event(pygame.K_F5)])

        session.unmount.assert_called_once()
        session.mount.assert_called_once()
        session.handle_event.assert_not_called()

    def test_render_without_screen_is_noop(self) -> None:
        overlay = MagicMock()
        SessionWindow(MagicMock(), overlay).render()
        overlay.render.assert_not_called()
