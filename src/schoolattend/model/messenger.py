"""Open parent notifications in WhatsApp."""

from typing import Protocol
import urllib.parse
import webbrowser


class Messenger(Protocol):
    """Hands a message to an external messaging application."""

    def open_compose(self, contact: str, body: str) -> None: ...


class WhatsAppMessenger:
    """Open a pre-filled WhatsApp chat in the web browser.

    Delivery is not confirmed. The administrator finishes sending in WhatsApp.
    """

    base_url: str

    def __init__(self, base_url: str = "https://wa.me") -> None:
        self.base_url = base_url.rstrip("/")

    def compose_url(self, contact: str, body: str) -> str:
        """WhatsApp click-to-chat URL with the message pre-filled."""
        number = "".join(char for char in contact if char.isdigit())
        return f"{self.base_url}/{number}?text={urllib.parse.quote(body)}"

    def open_compose(self, contact: str, body: str) -> None:
        webbrowser.open(self.compose_url(contact, body), new=2)
