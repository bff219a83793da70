"""
Page shell for the public auth pages (no navigation, no sidebar).
"""

from .base import Component


class AuthLayout(Component):
    """Complete HTML document around a centered auth card."""

    def __init__(self, title: str, content: str, *, toasts: str = "") -> None:
        self.title = title
        self.content = content
        self.toasts = toasts

    def render(self) -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self.escape(self.title)} - TailorPro</title>
</head>
<body class="auth-page">
    {self.toasts}
    <main id="main-content" class="auth-main" role="main">
        {self.content}
    </main>
</body>
</html>"""
