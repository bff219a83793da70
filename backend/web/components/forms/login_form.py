"""
Login card: channel tabs + email/password form.
"""

from components.base import Component
from components.channel_tabs import ChannelTabs
from .fields import TextInputField
from .submit import SubmitButton


class LoginForm(Component):
    """Renders the sign-in card for one selected channel.

    The entered email is echoed back after a failed attempt; the password
    never is.
    """

    def __init__(
        self,
        channel: str,
        channels: list[str],
        *,
        email: str = "",
        loading: bool = False,
    ) -> None:
        self.channel = channel
        self.channels = channels
        self.email = email
        self.loading = loading

    def render(self) -> str:
        tabs = ChannelTabs("/auth/login", self.channels, self.channel, disabled=self.loading)
        email = TextInputField("email", "Email", required=True).render(
            value=self.email,
            input_type="email",
            autocomplete="username",
            placeholder="m@example.com",
            disabled=self.loading,
        )
        password = TextInputField("password", "Password", required=True).render(
            input_type="password",
            autocomplete="current-password",
            disabled=self.loading,
        )
        submit = SubmitButton("Login", loading_label="Logging in...", is_loading=self.loading)
        return f"""
        <section class="auth-card" aria-labelledby="login-title">
            <h1 id="login-title">Login to TailorPro</h1>
            <p class="auth-card__lead">Choose your login type to continue</p>
            {tabs.render()}
            <form method="post" action="/auth/login" class="auth-form" novalidate>
                <input type="hidden" name="channel" value="{self.escape(self.channel)}">
                {email}
                {password}
                <div class="form-actions">{submit.render()}</div>
            </form>
            <p class="auth-card__switch">Don't have an account? <a href="/auth/signup">Sign up</a></p>
        </section>
        """
