"""
Email delivery contract and the password reset message.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from html import escape
from datetime import datetime


class IEmailSender(ABC):
    """Delivers one email. Implementations report failure by returning False."""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        pass


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html: str
    text: str


def build_reset_url(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/auth/reset-password?token={token}"


def build_password_reset_email(
    user_name: str, reset_url: str, expires_minutes: int, app_name: str = "NoteMitra"
) -> EmailMessage:
    year = datetime.now().year
    subject = f"Password Reset Request - {app_name}"
    safe_name, safe_app, safe_url = escape(user_name), escape(app_name), escape(reset_url)

    html = f"""
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"><title>Reset Your Password</title></head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
      <div style="background: #667eea; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
        <h1 style="color: white; margin: 0;">{safe_app}</h1>
        <p style="color: white; margin: 10px 0 0 0;">Password Reset Request</p>
      </div>
      <div style="background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px;">
        <p>Hello <strong>{safe_name}</strong>,</p>
        <p>We received a request to reset your password for your {safe_app} account. If you didn't make this request, you can safely ignore this email.</p>
        <p style="text-align: center; margin: 30px 0;">
          <a href="{safe_url}" style="background: #667eea; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-weight: bold;">Reset Password</a>
        </p>
        <p style="color: #666; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #667eea; font-size: 14px;">{safe_url}</p>
        <p style="color: #856404; background: #fff3cd; padding: 15px; border-radius: 5px;">
          This link will expire in <strong>{expires_minutes} minutes</strong> for security reasons.
        </p>
        <p style="color: #999; font-size: 12px; text-align: center;">&copy; {year} {safe_app}. All rights reserved.</p>
      </div>
    </body>
    </html>
    """

    text = (
        f"Hello {user_name},\n\n"
        f"We received a request to reset your password for your {app_name} account.\n\n"
        f"To reset your password, visit the following link:\n{reset_url}\n\n"
        f"This link will expire in {expires_minutes} minutes for security reasons.\n\n"
        f"If you didn't request a password reset, please ignore this email.\n\n"
        f"(c) {year} {app_name}. All rights reserved.\n"
    )

    return EmailMessage(subject=subject, html=html, text=text)
