# TailorPro Component System
# Pure Python components for escaped HTML generation

from .base import Component
from .layout import AuthLayout
from .channel_tabs import ChannelTabs
from .toast import ToastRegion
from .continue_card import ContinueCard
from .forms import FormField, TextInputField, SubmitButton, LoginForm, SignupForm

__all__ = [
    "Component",
    "AuthLayout",
    "ChannelTabs",
    "ToastRegion",
    "ContinueCard",
    "FormField",
    "TextInputField",
    "SubmitButton",
    "LoginForm",
    "SignupForm",
]
