"""
Channel tabs for the auth pages.

Each tab is a plain link (`?channel=<value>`) so switching works without
JavaScript; the form carries the selected channel in a hidden input.
"""

from typing import Sequence

from .base import Component


CHANNEL_LABELS = {
    "admin": "Admin",
    "staff": "Staff",
    "deliverer": "Deliverer",
    "customer": "Customer",
}


class ChannelTabs(Component):
    def __init__(self, base_path: str, channels: Sequence[str], current: str, *, disabled: bool = False) -> None:
        self.base_path = base_path
        self.channels = list(channels)
        self.current = current
        self.disabled = disabled

    def render(self) -> str:
        tabs = []
        for value in self.channels:
            active = value == self.current
            attrs = self.attributes(
                href=None if self.disabled else f"{self.base_path}?channel={value}",
                role="tab",
                class_=self.classes("channel-tab", active=active),
                aria_selected="true" if active else "false",
                aria_disabled="true" if self.disabled else None,
                data_channel=value,
            )
            tabs.append(f"<a {attrs}>{self.escape(CHANNEL_LABELS.get(value, value.title()))}</a>")
        cols = len(self.channels)
        return f'<nav class="channel-tabs channel-tabs--{cols}" role="tablist">{"".join(tabs)}</nav>'
