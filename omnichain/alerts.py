"""
Operator alerts via Slack webhook and/or e-mail
"""

import logging
import os
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class AlertNotifier:
    def __init__(self):
        # Email notification settings
        self.smtp_server = os.getenv("SMTP_SERVER", "smtp.gmail.com")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_username = os.getenv("SMTP_USERNAME")
        self.smtp_password = os.getenv("SMTP_PASSWORD")
        self.notification_email = os.getenv("NOTIFICATION_EMAIL")

        # Slack webhook (optional)
        self.slack_webhook: Optional[str] = os.getenv("SLACK_WEBHOOK")

    def send_alert(self, message: str) -> None:
        """Send alert via email and/or Slack"""
        logger.error(f"ALERT: {message}")

        if self.smtp_username and self.smtp_password and self.notification_email:
            try:
                self._send_email_alert(message)
            except Exception as e:
                logger.error(f"Failed to send email alert: {e}")

        if self.slack_webhook:
            try:
                self._send_slack_alert(message)
            except Exception as e:
                logger.error(f"Failed to send Slack alert: {e}")

    def _send_email_alert(self, message: str) -> None:
        msg = MIMEMultipart()
        msg['From'] = self.smtp_username
        msg['To'] = self.notification_email
        msg['Subject'] = "Omnichain Rate Limit Alert"

        body = (
            f"Omnichain rate limit alert\n\n"
            f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
            f"Message: {message}\n"
        )
        msg.attach(MIMEText(body, 'plain'))

        server = smtplib.SMTP(self.smtp_server, self.smtp_port)
        try:
            server.starttls()
            server.login(self.smtp_username, self.smtp_password)
            server.send_message(msg)
        finally:
            server.quit()

    def _send_slack_alert(self, message: str) -> None:
        payload = {"text": f"🚨 Omnichain Rate Limit Alert: {message}"}
        response = requests.post(self.slack_webhook, json=payload, timeout=10)
        response.raise_for_status()
