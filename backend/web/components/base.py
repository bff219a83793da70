"""
Base component for the TailorPro auth pages.

Markup is produced by small Python classes instead of a template engine, so
escaping stays explicit and every piece can be unit-tested by rendering it.
"""

from typing import Any, Optional
import html


class Component:
    """Base class for all UI components."""

    def render(self) -> str:
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[str]) -> str:
        """Escape HTML entities; None renders as an empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Join CSS classes, adding each keyword class whose value is true.

        Example:
            >>> Component.classes("channel-tab", active=True, disabled=False)
            "channel-tab active"
        """
        names = [a for a in args if a]
        names.extend(key.replace("_", "-") for key, value in conditionals.items() if value)
        return " ".join(names)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Build an HTML attribute string.

        `class_`/`for_` lose their trailing underscore, other underscores become
        hyphens (`aria_selected` -> `aria-selected`). True renders a boolean
        attribute, False/None drop the attribute.
        """
        result = []
        for key, value in attrs.items():
            if key.endswith("_"):
                key = key[:-1]
            else:
                key = key.replace("_", "-")
            if value is True:
                result.append(key)
            elif value is not False and value is not None:
                result.append(f'{key}="{html.escape(str(value))}"')
        return " ".join(result)
