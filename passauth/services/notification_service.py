"""
Notification Service

Sends password recovery emails over SMTP.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from passauth.utils.errors import NotificationError

logger = logging.getLogger(__name__)

RESET_SUBJECT = 'Password reset request'


class Notifier:
    """
    SMTP notifier configured from the Flask app config.

    With MAIL_SUPPRESS_SEND set, messages are kept in `outbox` instead of
    being delivered.
    """

    def __init__(self, app=None):
        self.outbox = []
        self.suppress = False
        self.server = None
        self.port = None
        self.sender = None
        self.password = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.outbox = []
        self.suppress = app.config.get('MAIL_SUPPRESS_SEND', False)
        self.server = app.config.get('SMTP_SERVER')
        self.port = app.config.get('SMTP_PORT')
        self.sender = app.config.get('SENDER_EMAIL')
        self.password = app.config.get('SENDER_PASSWORD')
        app.extensions['notifier'] = self

    def send_reset_email(self, email, reset_url):
        """
        Send the recovery link to email.

        Args:
            email (str): Recipient address
            reset_url (str): Link embedding the reset token

        Raises:
            NotificationError: mail could not be handed to the SMTP server
        """
        body = f"""Hello,

A password reset was requested for your account.

Use the link below within the next hour to choose a new password:
{reset_url}

If you did not request this, you can ignore this email.
"""
        message = MIMEMultipart()
        message["From"] = self.sender or 'no-reply@localhost'
        message["To"] = email
        message["Subject"] = RESET_SUBJECT
        message.attach(MIMEText(body, "plain"))

        if self.suppress:
            self.outbox.append({'to': email, 'subject': RESET_SUBJECT, 'url': reset_url})
            logger.info(f"Mail sending suppressed, reset email for {email} kept in outbox")
            return

        if not self.sender or not self.password:
            logger.error("Email credentials not configured. Set SENDER_EMAIL and SENDER_PASSWORD environment variables.")
            raise NotificationError('Email delivery is not configured.')

        try:
            with smtplib.SMTP(self.server, self.port) as server:
                server.starttls()
                server.login(self.sender, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error sending reset email to {email}: {e}")
            raise NotificationError('Failed to send password reset email.') from e

        logger.info(f"Password reset email sent to {email}")
