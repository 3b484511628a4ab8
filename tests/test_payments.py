import json
import uuid

import pytest
from conftest import auth_headers

from nannyplacements.domain.payments.references import extract_interest_id, generate_tx_ref
from nannyplacements.domain.payments.repository import PaymentRepository
from nannyplacements.models import Interest, Payment
from nannyplacements.webhook_security import create_webhook_signature

WEBHOOK_SECRET = "whsec_test_secret"

# =============================================================================
# Transaction references
# =============================================================================


def test_tx_ref_formats():
    interest_id = str(uuid.uuid4())
    assert generate_tx_ref(interest_id, "nanny", now_ms=1700000000000) == f"nanny-int-{interest_id}-1700000000000"
    assert generate_tx_ref(interest_id, "cleaning", now_ms=1) == f"cleaner-{interest_id}-1"


def test_extract_interest_id_round_trip():
    interest_id = str(uuid.uuid4())
    assert extract_interest_id(generate_tx_ref(interest_id, "nanny")) == interest_id
    assert extract_interest_id(generate_tx_ref(interest_id, "cleaning")) == interest_id


@pytest.mark.parametrize("tx_ref", [None, "", "order-123", "nanny-int-not-a-uuid-123", "cleaner-1-2-3"])
def test_extract_interest_id_invalid(tx_ref):
    assert extract_interest_id(tx_ref) is None


# =============================================================================
# Helpers
# =============================================================================


@pytest.fixture
def accepted_interest(client, client_account, nanny_account) -> str:
    """An interest the nanny has approved, waiting on the client's payment"""
    interest_id = client.post(
        "/interests",
        json={"nanny_id": nanny_account["nanny_id"]},
        headers=auth_headers(client_account["access_token"]),
    ).json()["id"]
    client.post(
        f"/interests/{interest_id}/respond",
        json={"response": "approved"},
        headers=auth_headers(nanny_account["access_token"]),
    )
    return interest_id


def confirm(client, client_account, interest_id, transaction_id="txn-001", status="completed"):
    return client.post(
        "/payments/confirm",
        json={"interest_id": interest_id, "transaction_id": transaction_id, "status": status},
        headers=auth_headers(client_account["access_token"]),
    )


def post_webhook(client, payload: dict, secret=WEBHOOK_SECRET, timestamp=None):
    body = json.dumps(payload).encode()
    signature, ts = create_webhook_signature(secret, body, timestamp)
    return client.post(
        "/payments/webhook",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-Payment-Signature": signature,
            "X-Payment-Timestamp": ts,
        },
    )


# =============================================================================
# Checkout and confirmation
# =============================================================================


def test_checkout_parameters(client, client_account, accepted_interest):
    response = client.post(
        "/payments/checkout",
        json={"interest_id": accepted_interest},
        headers=auth_headers(client_account["access_token"]),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["amount"] == 200
    assert body["currency"] == "ZAR"
    assert body["customer_email"] == "client@example.com"
    assert extract_interest_id(body["tx_ref"]) == accepted_interest


def test_checkout_requires_nanny_approval(client, client_account, nanny_account):
    interest_id = client.post(
        "/interests",
        json={"nanny_id": nanny_account["nanny_id"]},
        headers=auth_headers(client_account["access_token"]),
    ).json()["id"]
    response = client.post(
        "/payments/checkout",
        json={"interest_id": interest_id},
        headers=auth_headers(client_account["access_token"]),
    )
    assert response.status_code == 409


def test_confirm_moves_to_awaiting_admin_and_emails_both(
    client, client_account, accepted_interest, mock_send_email
):
    mock_send_email.reset_mock()
    response = confirm(client, client_account, accepted_interest)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["interest_stage"] == "awaiting_admin"
    assert body["already_recorded"] is False
    assert {n["type"] for n in body["notifications"]} == {"payment_success_client", "payment_success_nanny"}
    assert mock_send_email.await_count == 2


def test_repeated_transaction_is_idempotent(client, db_session, client_account, accepted_interest):
    confirm(client, client_account, accepted_interest)
    response = confirm(client, client_account, accepted_interest)

    assert response.status_code == 200
    assert response.json()["already_recorded"] is True
    assert db_session.query(Payment).count() == 1


def test_second_transaction_for_paid_interest_conflicts(client, client_account, accepted_interest):
    confirm(client, client_account, accepted_interest)
    response = confirm(client, client_account, accepted_interest, transaction_id="txn-002")
    assert response.status_code == 409


def test_failed_payment_keeps_stage(client, db_session, client_account, accepted_interest):
    response = confirm(client, client_account, accepted_interest, transaction_id="txn-fail", status="failed")
    assert response.status_code == 200
    assert response.json()["interest_stage"] == "awaiting_payment"

    retry = confirm(client, client_account, accepted_interest, transaction_id="txn-ok")
    assert retry.json()["interest_stage"] == "awaiting_admin"
    assert db_session.query(Payment).count() == 2


def test_transaction_reused_for_other_interest_conflicts(client, db_session, client_account, nanny_account, accepted_interest):
    confirm(client, client_account, accepted_interest)
    db_session.query(Interest).filter(Interest.id == accepted_interest).update({"stage": "payment_rejected"})
    db_session.commit()

    other_id = client.post(
        "/interests",
        json={"nanny_id": nanny_account["nanny_id"]},
        headers=auth_headers(client_account["access_token"]),
    ).json()["id"]
    client.post(
        f"/interests/{other_id}/respond",
        json={"response": "approved"},
        headers=auth_headers(nanny_account["access_token"]),
    )
    assert confirm(client, client_account, other_id).status_code == 409


def test_full_flow_releases_contacts_after_admin_approval(
    client, client_account, nanny_account, accepted_interest, admin_token
):
    confirm(client, client_account, accepted_interest)

    pending = client.get(f"/interests/{accepted_interest}", headers=auth_headers(client_account["access_token"]))
    assert pending.json()["counterpart_contact"] is None

    response = client.post(
        f"/admin/interests/{accepted_interest}/decision",
        json={"decision": "approve"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 200
    assert response.json()["admin_approved"] is True

    as_client = client.get(f"/interests/{accepted_interest}", headers=auth_headers(client_account["access_token"]))
    assert as_client.json()["counterpart_contact"]["email"] == "nanny@example.com"
    as_nanny = client.get(f"/interests/{accepted_interest}", headers=auth_headers(nanny_account["access_token"]))
    assert as_nanny.json()["counterpart_contact"]["phone"] == "+27821234567"


def test_admin_reject_after_payment(client, client_account, accepted_interest, admin_token):
    confirm(client, client_account, accepted_interest)
    response = client.post(
        f"/admin/interests/{accepted_interest}/decision",
        json={"decision": "reject", "admin_message": "Payment reversed by the bank"},
        headers=auth_headers(admin_token),
    )
    assert response.json()["stage"] == "payment_rejected"
    assert response.json()["payment_status"] == "completed"


# =============================================================================
# Webhook
# =============================================================================


def test_signed_webhook_records_payment(client, accepted_interest):
    payload = {
        "tx_ref": generate_tx_ref(accepted_interest),
        "transaction_id": "gw-555",
        "status": "successful",
        "payment_method": "card",
        "amount": 200,
    }
    response = post_webhook(client, payload)
    assert response.status_code == 200, response.text
    assert response.json()["interest_stage"] == "awaiting_admin"

    again = post_webhook(client, payload)
    assert again.json()["already_recorded"] is True


def test_webhook_bad_signature(client, accepted_interest):
    payload = {"tx_ref": generate_tx_ref(accepted_interest), "transaction_id": "gw-1", "status": "successful"}
    assert post_webhook(client, payload, secret="wrong").status_code == 401


def test_webhook_replay_window(client, accepted_interest):
    payload = {"tx_ref": generate_tx_ref(accepted_interest), "transaction_id": "gw-1", "status": "successful"}
    assert post_webhook(client, payload, timestamp=1000).status_code == 401


def test_webhook_unknown_reference(client):
    payload = {"tx_ref": "order-42", "transaction_id": "gw-1", "status": "successful"}
    assert post_webhook(client, payload).status_code == 400


def test_webhook_underpayment_rejected(client, db_session, accepted_interest):
    payload = {
        "tx_ref": generate_tx_ref(accepted_interest),
        "transaction_id": "gw-2",
        "status": "successful",
        "amount": 20,
    }
    assert post_webhook(client, payload).status_code == 400
    assert db_session.query(Payment).count() == 0


# =============================================================================
# Reconcile and listing
# =============================================================================


def test_reconcile_repairs_paid_interest(client, db_session, accepted_interest, admin_token):
    interest = db_session.get(Interest, accepted_interest)
    db_session.add(
        Payment(
            client_id=interest.client_id,
            nanny_id=interest.nanny_id,
            interest_id=interest.id,
            amount=200,
            currency="ZAR",
            status="completed",
            transaction_id="orphan-1",
        )
    )
    db_session.commit()

    response = client.post("/admin/payments/reconcile", headers=auth_headers(admin_token))
    assert response.status_code == 200
    assert response.json() == {"repaired_interest_ids": [accepted_interest], "count": 1}

    again = client.post("/admin/payments/reconcile", headers=auth_headers(admin_token))
    assert again.json()["count"] == 0


def test_payment_listing_by_role(client, client_account, nanny_account, accepted_interest, admin_token):
    confirm(client, client_account, accepted_interest)

    assert len(client.get("/payments", headers=auth_headers(client_account["access_token"])).json()) == 1
    assert len(client.get("/admin/payments", headers=auth_headers(admin_token)).json()) == 1
    assert client.get("/payments", headers=auth_headers(nanny_account["access_token"])).status_code == 403


def test_concurrent_second_completed_payment_conflicts(
    client, db_session, client_account, accepted_interest, monkeypatch
):
    confirm(client, client_account, accepted_interest)

    # The read check misses the first payment; the partial unique index catches it
    original = PaymentRepository.get_completed_for_interest
    calls = []

    def miss_first_lookup(db, interest_id):
        calls.append(interest_id)
        return None if len(calls) == 1 else original(db, interest_id)

    monkeypatch.setattr(PaymentRepository, "get_completed_for_interest", staticmethod(miss_first_lookup))
    response = confirm(client, client_account, accepted_interest, transaction_id="txn-002")

    assert response.status_code == 409
    assert db_session.query(Payment).filter(Payment.status == "completed").count() == 1
