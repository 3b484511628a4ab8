from nannyplacements.email_templates import (
    SAFETY_GUIDELINES,
    interest_closed_template,
    nanny_response_template,
    welcome_email_template,
)
from nannyplacements.utils.sanitization import sanitize_multiline, sanitize_string


def test_welcome_carries_role_specific_safety_guidelines():
    nanny_html = welcome_email_template("Thandi", "nanny")
    client_html = welcome_email_template("Sarah", "client")

    assert SAFETY_GUIDELINES["nanny"][0] in nanny_html
    assert SAFETY_GUIDELINES["client"][0] not in nanny_html
    assert SAFETY_GUIDELINES["client"][0] in client_html
    assert "For Families" in client_html


def test_user_values_are_escaped():
    html = welcome_email_template("<script>x</script>", "client")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_declined_response_points_back_to_browse():
    html = nanny_response_template("Sarah", "Thandi", False, "Thandi has declined your request")
    assert "Declined Your Request" in html
    assert "/find-nanny" in html


def test_admin_message_keeps_line_breaks():
    html = interest_closed_template("Sarah", "Thandi", "cancelled", admin_message="Line one\nLine two")
    assert "Interest Request Cancelled" in html
    assert "Line one<br/>Line two" in html


def test_sanitize_helpers():
    assert sanitize_string(None) == ""
    assert sanitize_string('a"b\x00') == "a&quot;b"
    assert sanitize_multiline("<b>\nx") == "&lt;b&gt;<br/>x"
