"""User notifications."""

from recess.notify.log import LoggingNotifier
from recess.notify.toast import Toast, ToastKind, ToastNotifier, ToastOverlay, ToastQueue

__all__ = ["LoggingNotifier", "Toast", "ToastKind", "ToastNotifier", "ToastOverlay", "ToastQueue"]
