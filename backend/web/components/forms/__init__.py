"""
Form components for the auth pages.
"""

from .fields import FormField, TextInputField
from .submit import SubmitButton
from .login_form import LoginForm
from .signup_form import SignupForm

__all__ = [
    "FormField",
    "TextInputField",
    "SubmitButton",
    "LoginForm",
    "SignupForm",
]
