import logging

import resend
from flask import current_app

logger = logging.getLogger(__name__)


class ResendMailer:
    """Transactional email through Resend. ``send`` never raises."""

    def __init__(self, api_key=None, from_email=None):
        self.api_key = api_key
        self.from_email = from_email

    def send(self, to_email: str, subject: str, html: str, attachments=None):
        if not self.api_key or not self.from_email:
            return False, "Email not configured"
        if not to_email:
            return False, "No recipient"

        params = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        if attachments:
            params["attachments"] = [
                {"filename": a["filename"], "content": a["content"]}
                for a in attachments
            ]

        try:
            resend.api_key = self.api_key
            response = resend.Emails.send(params)
        except Exception as exc:
            return False, str(exc)

        logger.info("Email sent via Resend to %s: %s", to_email, response)
        return True, None


def get_mailer():
    return current_app.extensions["mailer"]
