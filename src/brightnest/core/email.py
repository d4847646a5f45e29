"""
Email Service using Resend

Handles sending emails for the parent registration flow.
"""

import asyncio
import logging
from html import escape

import resend

from brightnest.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's SDK is synchronous; keep it off the event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_waitlist_confirmation(
    to_email: str,
    parent_name: str | None,
    child_name: str | None,
    school_name: str,
    program: str,
    position: int,
) -> bool:
    """Tell a parent their child was added to a school's waitlist."""
    safe_parent_name = escape(parent_name or "there")
    safe_child_name = escape(child_name or "your child")
    safe_school_name = escape(school_name)
    safe_program = escape(program)

    login_url = f"{settings.frontend_url}/login"
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #4c1d95; margin-bottom: 24px; }}
            .position {{ background-color: #f5f3ff; border-left: 4px solid #667eea; padding: 16px; margin: 24px 0; }}
            .button {{ display: inline-block; background-color: #667eea; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">You're on the waitlist</h1>

            <p>Hi {safe_parent_name},</p>

            <p><strong>Great news!</strong> {safe_child_name} has been added to the
            <strong>{safe_program}</strong> waitlist at <strong>{safe_school_name}</strong>.</p>

            <div class="position">
                <p style="margin: 0;">Current waitlist position: <strong>#{position}</strong></p>
            </div>

            <p>Log in to your parent dashboard to track your child's position and
            receive updates on the enrollment process.</p>

            <a href="{login_url}" class="button">Track Your Child's Status</a>

            <div class="footer">
                <p>If you have questions about enrollment, please contact the school administration.</p>
                <p>BrightNest - Childcare Management</p>
            </div>
        </div>
    </body>
    </html>
    """
    return await send_email(
        to_email=to_email,
        subject=f"You're on the waitlist at {school_name}",
        html_content=html_content,
    )
