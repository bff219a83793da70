"""
Form field components shared by the login and sign-up forms.
"""

from typing import Optional

from ..base import Component


class FormField(Component):
    """Label + input slot + optional help/error text."""

    def __init__(
        self,
        field_id: str,
        label: str,
        *,
        required: bool = False,
        help_text: Optional[str] = None,
        error_text: Optional[str] = None,
    ) -> None:
        self.field_id = field_id
        self.label = label
        self.required = required
        self.help_text = help_text
        self.error_text = error_text

    @property
    def described_by(self) -> Optional[str]:
        ids = []
        if self.help_text:
            ids.append(f"{self.field_id}-help")
        if self.error_text:
            ids.append(f"{self.field_id}-error")
        return " ".join(ids) or None

    def render(self, input_html: str) -> str:
        wrapper = self.classes("form-field", form_field__error=bool(self.error_text))
        marker = '<span class="form-required" aria-hidden="true">*</span>' if self.required else ""
        help_html = (
            f'<p class="form-help" id="{self.field_id}-help">{self.escape(self.help_text)}</p>'
            if self.help_text
            else ""
        )
        error_html = (
            f'<p class="form-error" role="alert" id="{self.field_id}-error">{self.escape(self.error_text)}</p>'
            if self.error_text
            else ""
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-label")
        return (
            f'<div class="{wrapper}">'
            f"<label {label_attrs}>{self.escape(self.label)}{marker}</label>"
            f"{input_html}{help_html}{error_html}"
            "</div>"
        )


class TextInputField(FormField):
    """Single-line input (`text`, `email`, `password`, `tel`).

    Password inputs never echo a value back into the page.
    """

    def render(
        self,
        *,
        value: str = "",
        input_type: str = "text",
        autocomplete: Optional[str] = None,
        placeholder: Optional[str] = None,
        disabled: bool = False,
        **attrs: str,
    ) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type=input_type,
            value=None if input_type == "password" else value,
            autocomplete=autocomplete,
            placeholder=placeholder,
            required=self.required,
            disabled=disabled,
            class_="form-input",
            aria_describedby=self.described_by,
            aria_invalid="true" if self.error_text else "false",
            **attrs,
        )
        return super().render(f"<input {input_attrs}>")
