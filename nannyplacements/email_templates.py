"""
MJML Email Templates
All email templates using MJML for responsive, cross-client compatibility.
User-supplied values are escaped with sanitize_string before interpolation.
"""

from typing import Optional

from .config import ADMIN_NOTIFICATION_EMAIL, FRONTEND_URL, SITE_NAME
from .utils.sanitization import sanitize_multiline, sanitize_string

# Brand colors - Warm rose/slate color scheme
THEME = {
    "primary": "#e11d74",
    "primary_dark": "#be185d",
    "primary_light": "#fce7f3",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#16a34a",
    "warning": "#f59e0b",
    "danger": "#ef4444",
}

SAFETY_GUIDELINES = {
    "general": [
        "Always meet in public places for initial meetings",
        "Conduct thorough background checks",
        "Verify all certifications and references",
        "Trust your instincts - if something feels wrong, don't proceed",
        "Keep all communications through our platform initially",
    ],
    "nanny": [
        "Always verify the identity of potential employers",
        "Request to meet all family members before starting work",
        "Clarify expectations, duties, and emergency procedures",
        "Ensure you have emergency contact information",
        "Report any concerning behavior through our platform",
    ],
    "client": [
        "Thoroughly check all references and certifications",
        "Consider a trial period before committing long-term",
        "Provide clear instructions and emergency contacts",
        "Respect professional boundaries",
        "Report any issues through our platform",
    ],
}

DOCUMENT_LABELS = {
    "criminal_check": "Criminal Record Check",
    "credit_check": "Credit Check",
    "proof_of_residence": "Proof of Residence",
    "interview_video": "Interview Video",
    "profile_picture": "Profile Picture",
}

BADGE_LABELS = {
    "training_cpr": "CPR Training",
    "training_first_aid": "First Aid Training",
    "training_nanny": "Nanny Training",
    "training_child_development": "Child Development Training",
    "training_cleaning": "Cleaning Training",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    is_user_email: bool = True,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    footer_notice = ""
    if is_user_email:
        footer_notice = f"""
        <mj-text align="center" font-size="12px" color="#94a3b8" padding="12px 0 0 0">
          You're receiving this because you have an account with {SITE_NAME}.
        </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="22px" font-weight="700" color="{THEME['primary']}">
              {SITE_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              Need assistance? Contact us: {ADMIN_NOTIFICATION_EMAIL}
            </mj-text>
            {footer_notice}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _bullet_list(items: list[str]) -> str:
    return "<br/>".join(f"• {item}" for item in items)


def _safety_section(role: str) -> str:
    """Safety guidelines block shared by welcome and payment emails"""
    role_label = "Nannies" if role == "nanny" else "Families"
    return f"""
    <mj-divider border-color="{THEME['border']}" border-width="1px" padding="16px 0" />
    <mj-text font-weight="600" color="{THEME['text_primary']}">Safety Guidelines</mj-text>
    <mj-text padding="0 0 0 20px">{_bullet_list(SAFETY_GUIDELINES['general'])}</mj-text>
    <mj-text font-weight="600" color="{THEME['text_primary']}">For {role_label}</mj-text>
    <mj-text padding="0 0 0 20px">{_bullet_list(SAFETY_GUIDELINES[role])}</mj-text>
    <mj-text font-size="13px" color="{THEME['text_muted']}">
      {SITE_NAME} connects families and nannies. We do not employ nannies directly and are not
      responsible for the actions of users, incidents during employment or payment disputes between
      parties. Users remain responsible for their own due diligence and for following local
      employment laws.
    </mj-text>
    """


# ============================================================================
# ACCOUNTS
# ============================================================================


def welcome_email_template(user_name: str, role: str) -> str:
    """Welcome email for a new client or nanny"""
    name = sanitize_string(user_name)
    if role == "nanny":
        intro = (
            "Thank you for joining our platform as a nanny. Please complete your profile "
            "and academy training to start receiving client interests."
        )
        cta_url, cta_label = f"{FRONTEND_URL}/nanny-dashboard", "Complete Your Profile"
    else:
        intro = (
            "Thank you for joining our platform. You can now browse our verified nannies "
            "to find the perfect match for your family."
        )
        cta_url, cta_label = f"{FRONTEND_URL}/find-nanny", "Browse Nannies"

    content = f"""
    <mj-text>Hi {name},</mj-text>
    <mj-text>{intro}</mj-text>
    {_safety_section('nanny' if role == 'nanny' else 'client')}
    """

    return get_base_template(
        title=f"Welcome to {SITE_NAME}, {name}!",
        preview_text="Your account has been created successfully",
        content_sections=content,
        cta_url=cta_url,
        cta_label=cta_label,
    )


# ============================================================================
# INTEREST WORKFLOW
# ============================================================================


def new_interest_template(nanny_name: str, client_name: str, service_type: str, message: Optional[str]) -> str:
    """Tell a worker that a client is interested in them"""
    message_block = ""
    if message:
        message_block = f"""
        <mj-text background-color="{THEME['primary_light']}" padding="16px">
          "{sanitize_multiline(message)}"
        </mj-text>
        """

    content = f"""
    <mj-text>Hi {sanitize_string(nanny_name)},</mj-text>
    <mj-text>
      {sanitize_string(client_name)} is interested in your {service_type} services.
    </mj-text>
    {message_block}
    <mj-text>Please log in to your dashboard to approve or decline this request.</mj-text>
    """

    return get_base_template(
        title="New Client Interest",
        preview_text=f"{sanitize_string(client_name)} is interested in your services",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/nanny-dashboard",
        cta_label="Respond to Request",
    )


def interest_submitted_template(client_name: str, nanny_name: str, fee_amount: float, currency: str) -> str:
    """Confirm to the client that their interest was sent"""
    content = f"""
    <mj-text>Hi {sanitize_string(client_name)},</mj-text>
    <mj-text>Your interest in {sanitize_string(nanny_name)} has been sent.</mj-text>
    <mj-text font-weight="600" color="{THEME['text_primary']}">Next Steps</mj-text>
    <mj-text padding="0 0 0 20px">
      1. {sanitize_string(nanny_name)} reviews your request<br/>
      2. If approved, you pay the placement fee of {currency} {fee_amount:.2f}<br/>
      3. Our team verifies the payment and emails both of you the contact details
    </mj-text>
    """

    return get_base_template(
        title="Interest Submitted",
        preview_text="Your request has been sent",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/client-dashboard",
        cta_label="View Your Requests",
    )


def nanny_response_template(client_name: str, nanny_name: str, approved: bool, response_text: str) -> str:
    """Tell the client the worker approved or declined"""
    if approved:
        next_step = "You can now complete the placement fee payment from your dashboard."
        cta_label = "Pay Placement Fee"
    else:
        next_step = (
            "Don't be discouraged! There are many other qualified nannies available. "
            "Feel free to browse our platform and express interest in other nannies."
        )
        cta_label = "Browse Nannies"

    content = f"""
    <mj-text>Hi {sanitize_string(client_name)},</mj-text>
    <mj-text>{sanitize_string(response_text)}.</mj-text>
    <mj-text>{next_step}</mj-text>
    """

    verb = "Approved" if approved else "Declined"
    return get_base_template(
        title=f"{sanitize_string(nanny_name)} {verb} Your Request",
        preview_text=f"Your request was {verb.lower()}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/client-dashboard" if approved else f"{FRONTEND_URL}/find-nanny",
        cta_label=cta_label,
    )


def payment_success_template(
    recipient_name: str,
    recipient_role: str,
    counterpart_name: str,
    amount: float,
    currency: str,
    transaction_id: str,
) -> str:
    """Payment confirmation sent to both parties"""
    if recipient_role == "client":
        summary = f"Your payment for the placement with {sanitize_string(counterpart_name)} was successful."
    else:
        summary = f"{sanitize_string(counterpart_name)} has paid the placement fee for your services."

    content = f"""
    <mj-text>Hi {sanitize_string(recipient_name)},</mj-text>
    <mj-text>{summary}</mj-text>
    <mj-text padding="0 0 0 20px">
      Amount: {currency} {amount:.2f}<br/>
      Transaction ID: {sanitize_string(transaction_id)}
    </mj-text>
    <mj-text>
      An administrator will verify the payment and then share contact details with both parties.
    </mj-text>
    {_safety_section('client' if recipient_role == 'client' else 'nanny')}
    """

    return get_base_template(
        title="Payment Successful",
        preview_text="Payment received - awaiting admin approval",
        content_sections=content,
    )


def contact_details_released_template(
    recipient_name: str,
    counterpart_name: str,
    counterpart_email: Optional[str],
    counterpart_phone: Optional[str],
    counterpart_city: Optional[str],
) -> str:
    """Share the counterpart's contact details after admin approval"""
    content = f"""
    <mj-text>Hi {sanitize_string(recipient_name)},</mj-text>
    <mj-text>
      Great news! The placement has been approved. Here are the contact details for
      {sanitize_string(counterpart_name)}:
    </mj-text>
    <mj-text background-color="{THEME['primary_light']}" padding="16px">
      Name: {sanitize_string(counterpart_name)}<br/>
      Email: {sanitize_string(counterpart_email) or 'Not provided'}<br/>
      Phone: {sanitize_string(counterpart_phone) or 'Not provided'}<br/>
      City: {sanitize_string(counterpart_city) or 'Not provided'}
    </mj-text>
    <mj-text>Please reach out to arrange a first meeting in a public place.</mj-text>
    """

    return get_base_template(
        title="Contact Details Released",
        preview_text="Your placement has been approved",
        content_sections=content,
    )


def interest_closed_template(
    recipient_name: str,
    counterpart_name: str,
    reason: str,
    admin_message: Optional[str] = None,
) -> str:
    """Payment rejected or interest cancelled by an admin"""
    if reason == "payment_rejected":
        title = "Payment Not Approved"
        summary = (
            f"The payment for the placement with {sanitize_string(counterpart_name)} could not be "
            "verified and was not approved by our team."
        )
    else:
        title = "Interest Request Cancelled"
        summary = (
            f"The interest request involving {sanitize_string(counterpart_name)} has been "
            "cancelled by our team."
        )

    admin_block = ""
    if admin_message:
        admin_block = f"""<mj-text>Admin's message: "{sanitize_multiline(admin_message)}"</mj-text>"""

    content = f"""
    <mj-text>Hi {sanitize_string(recipient_name)},</mj-text>
    <mj-text>{summary}</mj-text>
    {admin_block}
    <mj-text>If you have questions, reply to this email or contact {ADMIN_NOTIFICATION_EMAIL}.</mj-text>
    """

    return get_base_template(title=title, preview_text=title, content_sections=content)


# ============================================================================
# ADMIN REVIEW OF WORKERS
# ============================================================================


def document_approved_template(nanny_name: str, document_type: str) -> str:
    label = DOCUMENT_LABELS.get(document_type, document_type)
    content = f"""
    <mj-text>Hi {sanitize_string(nanny_name)},</mj-text>
    <mj-text>Your {label} has been reviewed and approved by our team.</mj-text>
    """
    return get_base_template(
        title="Document Approved",
        preview_text=f"Your {label} was approved",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/nanny-dashboard",
        cta_label="View Dashboard",
    )


def profile_status_template(nanny_name: str, approved: bool) -> str:
    if approved:
        title = "Your Profile Is Live"
        body = "Your profile has been approved and is now visible to families on our platform."
    else:
        title = "Profile Update Required"
        body = (
            "Your profile was not approved at this time. Please review your details and documents "
            "and contact us if you need help."
        )
    content = f"""
    <mj-text>Hi {sanitize_string(nanny_name)},</mj-text>
    <mj-text>{body}</mj-text>
    """
    return get_base_template(
        title=title,
        preview_text=title,
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/nanny-dashboard",
        cta_label="View Profile",
    )


def badge_update_template(nanny_name: str, badge: str, awarded: bool) -> str:
    label = BADGE_LABELS.get(badge, badge)
    if awarded:
        title = "New Training Badge"
        body = f"Congratulations! The {label} badge has been added to your profile."
    else:
        title = "Training Badge Removed"
        body = f"The {label} badge has been removed from your profile."
    content = f"""
    <mj-text>Hi {sanitize_string(nanny_name)},</mj-text>
    <mj-text>{body}</mj-text>
    """
    return get_base_template(title=title, preview_text=body, content_sections=content)


# ============================================================================
# REVIEWS & CONTACT
# ============================================================================


def _rating_stars(rating: Optional[int]) -> str:
    if rating is None:
        return ""
    return "★" * rating + "☆" * (5 - rating) + f" ({rating}/5)"


def new_review_admin_template(
    client_name: str, nanny_name: str, rating: Optional[int], complaint_text: Optional[str]
) -> str:
    kind = "Review" if rating is not None else "Complaint"
    rating_block = f"<mj-text>Rating: {_rating_stars(rating)}</mj-text>" if rating is not None else ""
    text_block = (
        f"<mj-text>\"{sanitize_multiline(complaint_text)}\"</mj-text>" if complaint_text else ""
    )
    content = f"""
    <mj-text>{sanitize_string(client_name)} submitted a {kind.lower()} about {sanitize_string(nanny_name)}.</mj-text>
    {rating_block}
    {text_block}
    """
    return get_base_template(
        title=f"New {kind} Submitted",
        preview_text=f"New {kind.lower()} about {sanitize_string(nanny_name)}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/admin",
        cta_label="Open Admin Panel",
        is_user_email=False,
    )


def review_status_template(
    recipient_name: str,
    counterpart_name: str,
    recipient_role: str,
    rating: Optional[int],
    status: str,
    admin_message: Optional[str] = None,
) -> str:
    kind = "Review" if rating is not None else "Complaint"
    if recipient_role == "client":
        summary = f"Your {kind.lower()} about {sanitize_string(counterpart_name)} has been marked as {status}."
    else:
        summary = f"A client {kind.lower()} from {sanitize_string(counterpart_name)} has been marked as {status}."

    rating_block = f"<mj-text>Rating: {_rating_stars(rating)}</mj-text>" if rating is not None else ""
    admin_block = ""
    if admin_message:
        admin_block = f"""<mj-text>Admin's response: "{sanitize_multiline(admin_message)}"</mj-text>"""

    content = f"""
    <mj-text>Hi {sanitize_string(recipient_name)},</mj-text>
    <mj-text>{summary}</mj-text>
    {rating_block}
    {admin_block}
    """
    return get_base_template(
        title=f"Update on Your {kind}" if recipient_role == "client" else f"Update on Client {kind}",
        preview_text=summary,
        content_sections=content,
    )


def contact_form_template(name: str, email: str, subject: str, message: str) -> str:
    content = f"""
    <mj-text padding="0 0 0 20px">
      Name: {sanitize_string(name)}<br/>
      Email: {sanitize_string(email)}<br/>
      Subject: {sanitize_string(subject)}
    </mj-text>
    <mj-text>{sanitize_multiline(message)}</mj-text>
    """
    return get_base_template(
        title="New Contact Form Message",
        preview_text=sanitize_string(subject),
        content_sections=content,
        is_user_email=False,
    )
