"""
Card shown after a full-page sign-up instead of a bare redirect.
"""

from .base import Component


class ContinueCard(Component):
    """Heading, short lead and a single link on to the user's area.

    The toasts rendered above the card carry the actual outcome (account
    created, verification pending, role not yet assigned).
    """

    def __init__(self, heading: str, href: str, *, lead: str = "", label: str = "Continue") -> None:
        self.heading = heading
        self.href = href
        self.lead = lead
        self.label = label

    def render(self) -> str:
        lead = f'<p class="auth-card__lead">{self.escape(self.lead)}</p>' if self.lead else ""
        link = self.attributes(href=self.href, class_="btn btn-primary", data_testid="continue-link")
        return f"""
        <section class="auth-card" aria-labelledby="continue-title">
            <h1 id="continue-title">{self.escape(self.heading)}</h1>
            {lead}
            <div class="form-actions"><a {link}>{self.escape(self.label)}</a></div>
        </section>
        """
