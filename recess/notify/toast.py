"""On-screen toast notifications drawn with Pygame."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

import pygame

WARNING_TOAST_ID = "session-warning"
EXPIRED_TOAST_ID = "session-expired"


class ToastKind(Enum):
    """Toast severity."""

    WARNING = auto()
    ERROR = auto()


@dataclass
class Toast:
    """A single notification."""

    toast_id: str
    kind: ToastKind
    message: str
    expires_at: float  # seconds, same clock as the queue


class ToastQueue:
    """Thread-safe set of live toasts.

    Timer threads push toasts, the render loop reads them. A toast pushed with
    an id already on screen replaces it.
    """

    def __init__(self, now_fn: Callable[[], float] | None = None) -> None:
        self._now = now_fn or time.monotonic
        self._toasts: dict[str, Toast] = {}
        self._lock = threading.Lock()

    def push(self, toast_id: str, kind: ToastKind, message: str, duration_ms: int) -> Toast:
        toast = Toast(
            toast_id=toast_id,
            kind=kind,
            message=message,
            expires_at=self._now() + duration_ms / 1000,
        )
        with self._lock:
            self._toasts[toast_id] = toast
        return toast

    def dismiss(self, toast_id: str) -> None:
        with self._lock:
            self._toasts.pop(toast_id, None)

    def active(self) -> list[Toast]:
        """Live toasts, oldest expiry first. Expired toasts are dropped."""
        now = self._now()
        with self._lock:
            for key in [k for k, t in self._toasts.items() if t.expires_at <= now]:
                del self._toasts[key]
            return sorted(self._toasts.values(), key=lambda t: t.expires_at)

    def __len__(self) -> int:
        return len(self.active())


class ToastNotifier:
    """Notifier that feeds a ToastQueue."""

    def __init__(self, queue: ToastQueue) -> None:
        self.queue = queue

    def show_warning(self, message: str, duration_ms: int) -> None:
        self.queue.push(WARNING_TOAST_ID, ToastKind.WARNING, message, duration_ms)

    def show_expired(self, message: str, duration_ms: int) -> None:
        # The warning is stale once the session is gone
        self.queue.dismiss(WARNING_TOAST_ID)
        self.queue.push(EXPIRED_TOAST_ID, ToastKind.ERROR, message, duration_ms)


class ToastOverlay:
    """Draws live toasts stacked at the top of the screen."""

    PADDING = 12
    MARGIN = 16

    COLORS = {
        ToastKind.WARNING: ((250, 200, 60), (40, 30, 0)),  # (background, text)
        ToastKind.ERROR: ((210, 60, 60), (255, 255, 255)),
    }

    def __init__(self, queue: ToastQueue, font_size: int = 22) -> None:
        self.queue = queue
        self._font_size = font_size
        self._font: pygame.font.Font | None = None

    def render(self, screen: pygame.Surface) -> None:
        """Draw every live toast onto screen."""
        if self._font is None:
            self._font = pygame.font.Font(None, self._font_size)

        width = screen.get_width()
        y = self.MARGIN
        for toast in self.queue.active():
            background, foreground = self.COLORS[toast.kind]
            text = self._font.render(toast.message, True, foreground)
            box = pygame.Rect(
                self.MARGIN,
                y,
                min(width - 2 * self.MARGIN, text.get_width() + 2 * self.PADDING),
                text.get_height() + 2 * self.PADDING,
            )
            pygame.draw.rect(screen, background, box, border_radius=8)
            screen.blit(text, (box.x + self.PADDING, box.y + self.PADDING))
            y = box.bottom + self.MARGIN // 2
