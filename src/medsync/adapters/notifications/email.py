"""Email notification adapter."""

import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog

logger = structlog.get_logger()


@dataclass
class EmailConfig:
    """Email configuration."""

    smtp_host: str
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    from_email: str = "no-reply@medsync.example.com"
    from_name: str = "MedSync"
    use_tls: bool = True


class EmailNotifier:
    """Delivers notifications via email (SMTP)."""

    def __init__(self, config: EmailConfig):
        """Initialize the email notifier.

        Args:
            config: Email configuration settings.
        """
        self.config = config

    def send(
        self,
        to_emails: list[str],
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> bool:
        """Send email notification.

        Returns True if the email was sent successfully.
        Note: This is synchronous - use in a thread pool for async contexts.
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.config.from_name} <{self.config.from_email}>"
            msg["To"] = ", ".join(to_emails)

            if body_text:
                msg.attach(MIMEText(body_text, "plain"))
            msg.attach(MIMEText(body_html, "html"))

            with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port) as server:
                if self.config.use_tls:
                    server.starttls()

                if self.config.smtp_user and self.config.smtp_password:
                    server.login(self.config.smtp_user, self.config.smtp_password)

                server.sendmail(
                    self.config.from_email,
                    to_emails,
                    msg.as_string(),
                )

            logger.info(
                "email_sent",
                recipients=len(to_emails),
                subject=subject,
            )

            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "email_error",
                recipients=len(to_emails),
                subject=subject,
                error=str(e),
            )
            return False

    def send_otp_code(self, to_email: str, code: str, expires_in_minutes: int) -> bool:
        """Send a one-time code email."""
        subject = "Your MedSync verification code"

        body_html = f"""
        <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <h2>Your verification code</h2>

            <p>Use this code to continue:</p>

            <p style="font-size: 28px; letter-spacing: 8px; font-family: monospace;">
                <strong>{code}</strong>
            </p>

            <p>The code expires in {expires_in_minutes} minutes.
            If you didn't ask for it, you can ignore this email.</p>

            <hr style="border: none; border-top: 1px solid #ddd; margin: 30px 0;">
            <p style="color: #666; font-size: 12px;">
                This email was sent by MedSync. Please do not reply to this email.
            </p>
        </body>
        </html>
        """

        body_text = f"""
Your verification code: {code}

The code expires in {expires_in_minutes} minutes.
If you didn't ask for it, you can ignore this email.

---
This email was sent by MedSync. Please do not reply to this email.
        """

        return self.send([to_email], subject, body_html, body_text)
