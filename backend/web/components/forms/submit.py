"""
Submit button component.
"""

from ..base import Component


class SubmitButton(Component):
    """Primary form action; shows the busy label and disables itself while loading."""

    def __init__(self, label: str, *, loading_label: str = "Please wait...", is_loading: bool = False) -> None:
        self.label = label
        self.loading_label = loading_label
        self.is_loading = is_loading

    def render(self) -> str:
        label = self.loading_label if self.is_loading else self.label
        attrs = self.attributes(
            type="submit",
            class_="btn btn-primary",
            disabled=self.is_loading,
            aria_busy="true" if self.is_loading else None,
        )
        return f"<button {attrs}>{self.escape(label)}</button>"
