"""Tests for notifiers and toasts."""

import logging

import pygame

from recess.notify.log import LoggingNotifier
from recess.notify.toast import (
    EXPIRED_TOAST_ID,
    WARNING_TOAST_ID,
    ToastKind,
    ToastNotifier,
    ToastOverlay,
    ToastQueue,
)


class FakeClock:
    def __init__(self) -> None:
        self.t = 0.0

    def __call__(self) -> float:
        return self.t


class TestToastQueue:
    def test_toast_expires_after_duration(self) -> None:
        clock = FakeClock()
        queue = ToastQueue(now_fn=clock)
        queue.push("a", ToastKind.WARNING, "hello", 2000)

        clock.t = 1.9
        assert [t.message for t in queue.active()] == ["hello"]
        clock.t = 2.0
        assert queue.active() == []

    def test_same_id_replaces(self) -> None:
        queue = ToastQueue(now_fn=FakeClock())
        queue.push("a", ToastKind.WARNING, "first", 1000)
        queue.push("a", ToastKind.WARNING, "second", 1000)
        assert [t.message for t in queue.active()] == ["second"]

    def test_dismiss(self) -> None:
        queue = ToastQueue(now_fn=FakeClock())
        queue.push("a", ToastKind.ERROR, "x", 1000)
        queue.dismiss("a")
        queue.dismiss("a")
        assert len(queue) == 0


class TestToastNotifier:
    def test_warning_toast(self) -> None:
        queue = ToastQueue(now_fn=FakeClock())
        ToastNotifier(queue).show_warning("soon", 30000)

        (toast,) = queue.active()
        assert toast.toast_id == WARNING_TOAST_ID
        assert toast.kind == ToastKind.WARNING

    def test_expired_replaces_warning(self) -> None:
        queue = ToastQueue(now_fn=FakeClock())
        notifier = ToastNotifier(queue)
        notifier.show_warning("soon", 30000)
        notifier.show_expired("gone", 10000)

        (toast,) = queue.active()
        assert toast.toast_id == EXPIRED_TOAST_ID
        assert toast.kind == ToastKind.ERROR
        assert toast.message == "gone"


class TestToastOverlay:
    def test_render_draws_toasts(self) -> None:
        pygame.font.init()
        queue = ToastQueue(now_fn=FakeClock())
        queue.push("a", ToastKind.ERROR, "Session expired", 1000)
        screen = pygame.Surface((400, 300))

        ToastOverlay(queue).render(screen)

        background, _ = ToastOverlay.COLORS[ToastKind.ERROR]
        # Top edge of the box, clear of the rounded corner and the text
        x = ToastOverlay.MARGIN + ToastOverlay.PADDING
        y = ToastOverlay.MARGIN + 2
        assert tuple(screen.get_at((x, y)))[:3] == background


class TestLoggingNotifier:
    def test_logs_notifications(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            notifier = LoggingNotifier()
            notifier.show_warning("soon", 100)
            notifier.show_expired("gone", 100)

        assert "soon" in caplog.text
        assert "gone" in caplog.text
