"""
Email Service using Resend
Provides email functionality using MJML templates for responsive design
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import ADMIN_NOTIFICATION_EMAIL, EMAIL_FROM_ADDRESS, PAYMENT_CURRENCY, RESEND_API_KEY, SITE_NAME
from .email_templates import (
    badge_update_template,
    contact_details_released_template,
    contact_form_template,
    document_approved_template,
    interest_closed_template,
    interest_submitted_template,
    nanny_response_template,
    new_interest_template,
    new_review_admin_template,
    payment_success_template,
    profile_status_template,
    review_status_template,
    welcome_email_template,
)

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address
        reply_to: Optional Reply-To address

    Returns:
        Send response dict
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        email_data = {
            "from": from_address or EMAIL_FROM_ADDRESS,
            "to": recipients,
            "subject": subject,
            "html": html_content,
        }
        if reply_to:
            email_data["reply_to"] = reply_to

        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


# ============================================
# Pre-built Emails for Marketplace Events
# ============================================


async def send_welcome_email(to: str, user_name: str, role: str) -> dict:
    return await send_email(
        to=to,
        subject=f"Welcome to {SITE_NAME}",
        mjml_content=welcome_email_template(user_name, role),
    )


async def send_new_interest_email(
    to: str, nanny_name: str, client_name: str, service_type: str, message: Optional[str]
) -> dict:
    return await send_email(
        to=to,
        subject=f"New client interest - {SITE_NAME}",
        mjml_content=new_interest_template(nanny_name, client_name, service_type, message),
    )


async def send_interest_submitted_email(
    to: str, client_name: str, nanny_name: str, fee_amount: float
) -> dict:
    return await send_email(
        to=to,
        subject=f"Your interest request was sent - {SITE_NAME}",
        mjml_content=interest_submitted_template(client_name, nanny_name, fee_amount, PAYMENT_CURRENCY),
    )


async def send_nanny_response_email(
    to: str, client_name: str, nanny_name: str, approved: bool, response_text: str
) -> dict:
    verb = "approved" if approved else "declined"
    return await send_email(
        to=to,
        subject=f"{nanny_name} has {verb} your request - {SITE_NAME}",
        mjml_content=nanny_response_template(client_name, nanny_name, approved, response_text),
    )


async def send_payment_success_email(
    to: str,
    recipient_name: str,
    recipient_role: str,
    counterpart_name: str,
    amount: float,
    transaction_id: str,
) -> dict:
    return await send_email(
        to=to,
        subject=f"Payment successful - {SITE_NAME}",
        mjml_content=payment_success_template(
            recipient_name, recipient_role, counterpart_name, amount, PAYMENT_CURRENCY, transaction_id
        ),
    )


async def send_contact_details_email(
    to: str,
    recipient_name: str,
    counterpart_name: str,
    counterpart_email: Optional[str],
    counterpart_phone: Optional[str],
    counterpart_city: Optional[str],
) -> dict:
    return await send_email(
        to=to,
        subject=f"Contact details for {counterpart_name} - {SITE_NAME}",
        mjml_content=contact_details_released_template(
            recipient_name, counterpart_name, counterpart_email, counterpart_phone, counterpart_city
        ),
    )


async def send_interest_closed_email(
    to: str, recipient_name: str, counterpart_name: str, reason: str, admin_message: Optional[str] = None
) -> dict:
    subject = "Payment not approved" if reason == "payment_rejected" else "Interest request cancelled"
    return await send_email(
        to=to,
        subject=f"{subject} - {SITE_NAME}",
        mjml_content=interest_closed_template(recipient_name, counterpart_name, reason, admin_message),
    )


async def send_document_approved_email(to: str, nanny_name: str, document_type: str) -> dict:
    return await send_email(
        to=to,
        subject=f"Document approved - {SITE_NAME}",
        mjml_content=document_approved_template(nanny_name, document_type),
    )


async def send_profile_status_email(to: str, nanny_name: str, approved: bool) -> dict:
    subject = "Your profile has been approved" if approved else "Your profile needs attention"
    return await send_email(
        to=to,
        subject=f"{subject} - {SITE_NAME}",
        mjml_content=profile_status_template(nanny_name, approved),
    )


async def send_badge_update_email(to: str, nanny_name: str, badge: str, awarded: bool) -> dict:
    return await send_email(
        to=to,
        subject=f"Training badge update - {SITE_NAME}",
        mjml_content=badge_update_template(nanny_name, badge, awarded),
    )


async def send_new_review_admin_email(
    client_name: str, nanny_name: str, rating: Optional[int], complaint_text: Optional[str]
) -> dict:
    kind = "review" if rating is not None else "complaint"
    return await send_email(
        to=ADMIN_NOTIFICATION_EMAIL,
        subject=f"New {kind} about {nanny_name} - {SITE_NAME}",
        mjml_content=new_review_admin_template(client_name, nanny_name, rating, complaint_text),
    )


async def send_review_status_email(
    to: str,
    recipient_name: str,
    counterpart_name: str,
    recipient_role: str,
    rating: Optional[int],
    status: str,
    admin_message: Optional[str] = None,
) -> dict:
    kind = "Review" if rating is not None else "Complaint"
    prefix = f"Update on Your {kind}" if recipient_role == "client" else f"Update on Client {kind}"
    return await send_email(
        to=to,
        subject=f"{prefix} - {SITE_NAME}",
        mjml_content=review_status_template(
            recipient_name, counterpart_name, recipient_role, rating, status, admin_message
        ),
    )


async def send_contact_form_email(name: str, email: str, subject: str, message: str) -> dict:
    return await send_email(
        to=ADMIN_NOTIFICATION_EMAIL,
        subject=f"Contact form: {subject}",
        mjml_content=contact_form_template(name, email, subject, message),
        reply_to=email,
    )
