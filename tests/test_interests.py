import pytest
from conftest import approve_nanny, auth_headers, signup
from fastapi import HTTPException

from nannyplacements.domain.interests.repository import InterestRepository
from nannyplacements.domain.interests.service import InterestService
from nannyplacements.domain.interests.state_machine import (
    Event,
    InvalidTransitionError,
    Stage,
    can_apply,
    is_terminal,
    next_stage,
)
from nannyplacements.models import Interest

# =============================================================================
# State machine
# =============================================================================


@pytest.mark.parametrize(
    "stage, event, expected",
    [
        (Stage.PENDING_RESPONSE, Event.NANNY_APPROVE, Stage.AWAITING_PAYMENT),
        (Stage.PENDING_RESPONSE, Event.NANNY_DECLINE, Stage.DECLINED),
        (Stage.AWAITING_PAYMENT, Event.PAYMENT_COMPLETED, Stage.AWAITING_ADMIN),
        (Stage.AWAITING_ADMIN, Event.ADMIN_APPROVE, Stage.COMPLETED),
        (Stage.AWAITING_ADMIN, Event.ADMIN_REJECT, Stage.PAYMENT_REJECTED),
        (Stage.PENDING_RESPONSE, Event.ADMIN_CANCEL, Stage.CANCELLED),
        (Stage.AWAITING_PAYMENT, Event.ADMIN_CANCEL, Stage.CANCELLED),
    ],
)
def test_allowed_transitions(stage, event, expected):
    assert next_stage(stage.value, event) == expected


def test_contact_release_requires_payment():
    with pytest.raises(InvalidTransitionError):
        next_stage(Stage.AWAITING_PAYMENT.value, Event.ADMIN_APPROVE)
    assert not can_apply(Stage.PENDING_RESPONSE.value, Event.ADMIN_APPROVE)


def test_paid_interest_cannot_be_cancelled():
    assert not can_apply(Stage.AWAITING_ADMIN.value, Event.ADMIN_CANCEL)


def test_terminal_stages():
    for stage in ("declined", "completed", "payment_rejected", "cancelled"):
        assert is_terminal(stage)
        for event in Event:
            assert not can_apply(stage, event)
    assert not is_terminal("awaiting_admin")


# =============================================================================
# Workflow API
# =============================================================================


def express(client, client_account, nanny_account, **payload):
    body = {"nanny_id": nanny_account["nanny_id"], "message": "Looking for weekday help"}
    body.update(payload)
    return client.post("/interests", json=body, headers=auth_headers(client_account["access_token"]))


def test_express_interest_notifies_both_parties(client, client_account, nanny_account, mock_send_email):
    mock_send_email.reset_mock()
    response = express(client, client_account, nanny_account)

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["stage"] == "pending_response"
    assert body["status"] == "pending"
    assert body["payment_status"] is None
    assert body["fee_amount"] == 200
    assert body["counterpart_contact"] is None
    recipients = [call.kwargs["to"] for call in mock_send_email.await_args_list]
    assert recipients == ["nanny@example.com", "client@example.com"]


def test_incomplete_client_profile_is_rejected(client, nanny_account):
    incomplete = signup(client, "client", email="bare@example.com", phone=None, city=None)
    response = express(client, incomplete, nanny_account)
    assert response.status_code == 400


def test_unapproved_nanny_is_not_found(client, client_account):
    pending = signup(client, "nanny", email="pending@example.com")
    response = client.post(
        "/interests",
        json={"nanny_id": pending["user_id"]},
        headers=auth_headers(client_account["access_token"]),
    )
    assert response.status_code == 404


def test_open_interest_blocks_duplicate(client, client_account, nanny_account):
    assert express(client, client_account, nanny_account).status_code == 201
    assert express(client, client_account, nanny_account).status_code == 409


def test_declined_interest_allows_new_request(client, client_account, nanny_account):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    client.post(
        f"/interests/{interest_id}/respond",
        json={"response": "declined"},
        headers=auth_headers(nanny_account["access_token"]),
    )
    assert express(client, client_account, nanny_account).status_code == 201


def test_cleaning_request_requires_cleaning_type(client, client_account, nanny_account):
    assert express(client, client_account, nanny_account, service_type="cleaning").status_code == 422


def test_cleaning_fee_by_type(client, db_session, client_account):
    cleaner = signup(client, "nanny", email="cleaner@example.com", experience_type="cleaning")
    nanny = approve_nanny(db_session, cleaner["user_id"])
    response = client.post(
        "/interests",
        json={"nanny_id": nanny.id, "service_type": "cleaning", "cleaning_type": "once_off"},
        headers=auth_headers(client_account["access_token"]),
    )
    assert response.status_code == 201
    assert response.json()["fee_amount"] == 400


def test_nanny_only_worker_cannot_take_cleaning_request(client, client_account, nanny_account):
    response = express(client, client_account, nanny_account, service_type="cleaning", cleaning_type="part_time")
    assert response.status_code == 400


def test_nanny_approval_sets_response_text(client, client_account, nanny_account):
    interest_id = express(client, client_account, nanny_account).json()["id"]

    response = client.post(
        f"/interests/{interest_id}/respond",
        json={"response": "approved"},
        headers=auth_headers(nanny_account["access_token"]),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["stage"] == "awaiting_payment"
    assert body["status"] == "approved"
    assert body["payment_status"] == "pending"
    assert body["nanny_response"].startswith("Thandi has approved your request on ")


def test_second_response_conflicts(client, client_account, nanny_account):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    headers = auth_headers(nanny_account["access_token"])
    client.post(f"/interests/{interest_id}/respond", json={"response": "approved"}, headers=headers)

    response = client.post(f"/interests/{interest_id}/respond", json={"response": "declined"}, headers=headers)
    assert response.status_code == 409


def test_other_nanny_cannot_respond(client, db_session, client_account, nanny_account):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    other = signup(client, "nanny", email="other@example.com")
    approve_nanny(db_session, other["user_id"])

    response = client.post(
        f"/interests/{interest_id}/respond",
        json={"response": "approved"},
        headers=auth_headers(other["access_token"]),
    )
    assert response.status_code == 404


def test_admin_responds_on_behalf(client, client_account, nanny_account, admin_token):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    response = client.post(
        f"/admin/interests/{interest_id}/respond",
        json={"response": "declined"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 200
    assert response.json()["nanny_response"].startswith("Admin has declined your request on ")


def test_admin_cannot_release_contacts_before_payment(client, client_account, nanny_account, admin_token):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    client.post(
        f"/interests/{interest_id}/respond",
        json={"response": "approved"},
        headers=auth_headers(nanny_account["access_token"]),
    )
    response = client.post(
        f"/admin/interests/{interest_id}/decision",
        json={"decision": "approve"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 409


def test_admin_cancel_notifies_both(client, client_account, nanny_account, admin_token, mock_send_email):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    mock_send_email.reset_mock()

    response = client.post(
        f"/admin/interests/{interest_id}/cancel",
        json={"admin_message": "Worker unavailable"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 200
    assert response.json()["stage"] == "cancelled"
    assert mock_send_email.await_count == 2


def test_lost_race_reports_conflict(client, db_session, client_account, nanny_account):
    interest_id = express(client, client_account, nanny_account).json()["id"]

    # Another request moves the row first; the compare-and-set must not match
    assert InterestRepository.transition(
        db_session, interest_id, Event.NANNY_DECLINE, Stage.DECLINED.value
    )
    assert not InterestRepository.transition(
        db_session, interest_id, Event.NANNY_APPROVE, Stage.AWAITING_PAYMENT.value
    )
    db_session.expire_all()
    assert db_session.get(Interest, interest_id).stage == "declined"


def test_listing_and_ownership(client, client_account, nanny_account, admin_token):
    interest_id = express(client, client_account, nanny_account).json()["id"]
    outsider = signup(client, "client", email="outsider@example.com")

    assert len(client.get("/interests", headers=auth_headers(client_account["access_token"])).json()) == 1
    assert len(client.get("/interests", headers=auth_headers(nanny_account["access_token"])).json()) == 1
    assert client.get("/interests", headers=auth_headers(outsider["access_token"])).json() == []
    assert (
        client.get(f"/interests/{interest_id}", headers=auth_headers(outsider["access_token"])).status_code
        == 404
    )

    admin_list = client.get("/admin/interests?stage=pending_response", headers=auth_headers(admin_token))
    assert [i["id"] for i in admin_list.json()] == [interest_id]
    assert client.get("/admin/interests?stage=bogus", headers=auth_headers(admin_token)).status_code == 400


# =============================================================================
# Database guards
# =============================================================================


def test_concurrent_duplicate_interest_conflicts(client, db_session, client_account, nanny_account, monkeypatch):
    headers = auth_headers(client_account["access_token"])
    client.post("/interests", json={"nanny_id": nanny_account["nanny_id"]}, headers=headers)

    # Both requests passed the read check; only the unique index stands in the way
    monkeypatch.setattr(InterestRepository, "find_blocking_interest", staticmethod(lambda db, c, n: None))
    response = client.post("/interests", json={"nanny_id": nanny_account["nanny_id"]}, headers=headers)

    assert response.status_code == 409
    assert db_session.query(Interest).count() == 1


def test_closed_interest_does_not_block_index(client, db_session, client_account, nanny_account, admin_token):
    headers = auth_headers(client_account["access_token"])
    first = client.post("/interests", json={"nanny_id": nanny_account["nanny_id"]}, headers=headers).json()["id"]
    client.post(f"/admin/interests/{first}/cancel", json={}, headers=auth_headers(admin_token))

    again = client.post("/interests", json={"nanny_id": nanny_account["nanny_id"]}, headers=headers)
    assert again.status_code == 201
    assert db_session.query(Interest).count() == 2


def test_transition_needs_both_parties():
    interest = Interest(id="orphan", stage=Stage.PENDING_RESPONSE.value, fee_amount=200)
    with pytest.raises(HTTPException) as exc_info:
        InterestService._parties(interest)
    assert exc_info.value.status_code == 409
