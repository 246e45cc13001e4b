"""Pygame window hosting the authenticated area."""

from dataclasses import dataclass
from typing import Any

import pygame

from recess.notify.toast import ToastOverlay
from recess.session.controller import SessionTimeout
from recess.session.timer import TimeoutState


@dataclass
class WindowConfig:
    """Window configuration."""

    resolution: tuple[int, int] = (800, 600)
    fps: int = 30
    title: str = "Recess"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WindowConfig":
        res = data.get("resolution", [800, 600])
        return cls(
            resolution=(int(res[0]), int(res[1])) if res else (800, 600),
            fps=int(data.get("fps", 30)),
            title=str(data.get("title", "Recess")),
        )


class SessionWindow:
    """Renders session status and pumps input events into the session timeout."""

    STATE_COLORS = {
        TimeoutState.IDLE: (100, 100, 100),  # Gray
        TimeoutState.ARMED: (0, 200, 0),  # Green
        TimeoutState.WARNED: (230, 180, 0),  # Amber
        TimeoutState.EXPIRED: (200, 0, 0),  # Red
    }

    def __init__(
        self,
        session: SessionTimeout,
        overlay: ToastOverlay,
        config: WindowConfig | None = None,
    ) -> None:
        self.session = session
        self.overlay = overlay
        self.config = config or WindowConfig()

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._running = False

    def initialize(self) -> None:
        """Initialize Pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._screen = pygame.display.set_mode(self.config.resolution)
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 28)
        self._running = True

    def shutdown(self) -> None:
        """Shutdown Pygame."""
        self._running = False
        pygame.quit()

    def process_events(self, events: list[Any] | None = None) -> bool:
        """Process Pygame events.

        Args:
            events: Events to handle. Defaults to the Pygame queue.

        Returns:
            True if should continue running, False to quit.
        """
        for event in events if events is not None else pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key == pygame.K_F5:
                    self.reload()
                    continue
            self.session.handle_event(event)
        return True

    def reload(self) -> None:
        """Leave and re-enter the authenticated area, like a page reload."""
        self.session.unmount()
        self.session.mount()

    def render(self) -> None:
        """Render the current frame."""
        if self._screen is None or self._font is None:
            return

        self._screen.fill((24, 28, 40))

        state = self.session.state
        label = self._font.render(f"Session: {state.name.lower()}", True, (230, 230, 230))
        self._screen.blit(label, (20, self._screen.get_height() - 40))
        pygame.draw.circle(
            self._screen,
            self.STATE_COLORS.get(state, (100, 100, 100)),
            (self._screen.get_width() - 20, self._screen.get_height() - 20),
            10,
        )

        self.overlay.render(self._screen)
        pygame.display.flip()

    def tick(self) -> None:
        """Wait for next frame (maintain FPS)."""
        if self._clock is not None:
            self._clock.tick(self.config.fps)

    def run_frame(self) -> bool:
        """Run a single frame of the render loop.

        Returns:
            True if should continue, False to quit.
        """
        if not self.process_events():
            return False
        self.render()
        self.tick()
        return True
