"""
HTML bodies for the transactional e-mails.
"""

from datetime import datetime

_LAYOUT = (
    '<div style="max-width: 600px; margin: 0 auto; padding: 20px; '
    'font-family: Arial, sans-serif;">{body}</div>'
)

_BUTTON = (
    '<div style="text-align: center; margin: 30px 0;">'
    '<a href="{url}" style="background-color: {color}; color: white; '
    "padding: 12px 30px; text-decoration: none; border-radius: 5px; "
    'display: inline-block;">{label}</a></div>'
)

_FALLBACK_LINK = (
    '<p style="color: #666; font-size: 14px;">'
    "If the button does not work, copy this link into your browser:<br>"
    '<a href="{url}">{url}</a></p>'
)


def verification_email(site_name: str, verify_url: str, resend: bool = False):
    """Return ``(subject, html)`` for an e-mail verification link."""
    if resend:
        subject = "Verify your email address again"
        heading = "Verify your email"
        intro = "You asked for a new verification e-mail. Click the link below to verify your address:"
    else:
        subject = "Verify your email address"
        heading = f"Welcome to {site_name}!"
        intro = "Thanks for signing up. Click the link below to verify your email address:"

    body = (
        f'<h2 style="color: #333;">{heading}</h2>'
        f"<p>{intro}</p>"
        + _BUTTON.format(url=verify_url, color="#007bff", label="Verify email")
        + _FALLBACK_LINK.format(url=verify_url)
        + '<p style="color: #666; font-size: 14px;">'
        "This link is valid for 24 hours. Request a new one once it expires.</p>"
    )
    return subject, _LAYOUT.format(body=body)


def password_reset_email(site_name: str, reset_url: str):
    subject = "Reset your password"
    body = (
        '<h2 style="color: #333;">Reset password</h2>'
        f"<p>A password reset was requested for your {site_name} account. "
        "Click the link below to choose a new password:</p>"
        + _BUTTON.format(url=reset_url, color="#dc3545", label="Reset password")
        + _FALLBACK_LINK.format(url=reset_url)
        + '<p style="color: #666; font-size: 14px;">'
        "This link is valid for 1 hour. If you did not ask for a reset, ignore this e-mail.</p>"
    )
    return subject, _LAYOUT.format(body=body)


def password_changed_email(site_name: str, changed_at: datetime):
    subject = "Your password was reset"
    body = (
        '<h2 style="color: #28a745;">Password reset successful</h2>'
        f"<p>The password of your {site_name} account has been reset. "
        "If this was not you, contact us immediately.</p>"
        '<p style="color: #666; font-size: 14px;">'
        f"Reset at: {changed_at:%Y-%m-%d %H:%M:%S} UTC</p>"
    )
    return subject, _LAYOUT.format(body=body)
