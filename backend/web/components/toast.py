"""
Toast region rendering notifications collected during a request.
"""

from typing import Iterable

from identity_access.ports import Notification, Severity

from .base import Component


class ToastRegion(Component):
    """Live region; destructive toasts use role=alert so screen readers announce them."""

    def __init__(self, notifications: Iterable[Notification]) -> None:
        self.notifications = list(notifications)

    def render(self) -> str:
        items = []
        for note in self.notifications:
            severity = Severity(note.severity).value
            role = "alert" if note.severity is Severity.DESTRUCTIVE else "status"
            items.append(
                f'<div class="toast toast--{severity}" role="{role}">'
                f'<p class="toast__title">{self.escape(note.title)}</p>'
                f'<p class="toast__description">{self.escape(note.description)}</p>'
                "</div>"
            )
        return f'<div id="toast-region" class="toast-region" aria-live="polite">{"".join(items)}</div>'
