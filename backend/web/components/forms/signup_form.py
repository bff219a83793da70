"""
Sign-up card: customer/staff tabs + registration form.
"""
from typing import Optional

from components.base import Component
from components.channel_tabs import ChannelTabs
from .fields import TextInputField
from .submit import SubmitButton


class SignupForm(Component):
    def __init__(
        self,
        channel: str,
        channels: list[str],
        *,
        values: Optional[dict] = None,
        loading: bool = False,
    ) -> None:
        self.channel = channel
        self.channels = channels
        self.values = values or {}
        self.loading = loading

    def render(self) -> str:
        """Renders the registration form; the password is never echoed back."""
        tabs = ChannelTabs("/auth/signup", self.channels, self.channel, disabled=self.loading)
        full_name = TextInputField("full_name", "Full Name", required=True).render(
            value=self.values.get("full_name", ""),
            autocomplete="name",
            placeholder="John Doe",
            disabled=self.loading,
        )
        phone = TextInputField("phone", "Phone (Optional)").render(
            value=self.values.get("phone", ""),
            input_type="tel",
            autocomplete="tel",
            placeholder="+1234567890",
            disabled=self.loading,
        )
        email = TextInputField("email", "Email", required=True).render(
            value=self.values.get("email", ""),
            input_type="email",
            autocomplete="email",
            placeholder="m@example.com",
            disabled=self.loading,
        )
        password = TextInputField("password", "Password", required=True).render(
            input_type="password",
            autocomplete="new-password",
            disabled=self.loading,
        )
        submit = SubmitButton("Sign Up", loading_label="Creating Account...", is_loading=self.loading)
        return f"""
        <section class="auth-card" aria-labelledby="signup-title">
            <h1 id="signup-title">Create an Account</h1>
            <p class="auth-card__lead">Join TailorPro today!</p>
            {tabs.render()}
            <form method="post" action="/auth/signup" class="auth-form" novalidate>
                <input type="hidden" name="channel" value="{self.escape(self.channel)}">
                {full_name}
                {phone}
                {email}
                {password}
                <div class="form-actions">{submit.render()}</div>
            </form>
            <p class="auth-card__switch">Already have an account? <a href="/auth/login">Login</a></p>
        </section>
        """
