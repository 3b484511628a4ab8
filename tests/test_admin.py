from conftest import auth_headers, signup

from nannyplacements.models import Nanny


def nanny_id_for(db_session, user_id):
    return db_session.query(Nanny).filter(Nanny.user_id == user_id).one().id


def test_dashboard_stats(client, db_session, admin_token, client_account, nanny_account):
    signup(client, "nanny", email="pending@example.com")
    client.post(
        "/interests",
        json={"nanny_id": nanny_account["nanny_id"]},
        headers=auth_headers(client_account["access_token"]),
    )
    client.post(
        "/reviews",
        json={"nanny_id": nanny_account["nanny_id"], "complaint_text": "Late"},
        headers=auth_headers(client_account["access_token"]),
    )

    response = client.get("/admin/stats", headers=auth_headers(admin_token))
    assert response.status_code == 200
    stats = response.json()
    assert stats["users_by_role"] == {"admin": 1, "client": 1, "nanny": 2, "no-role": 0}
    assert stats["nannies_pending_approval"] == 1
    assert stats["documents_pending_review"] == 0
    assert stats["interests_by_stage"] == {"pending_response": 1}
    assert stats["completed_payment_total"] == 0
    assert stats["open_reviews"] == 1


def test_stats_require_admin(client, client_account):
    response = client.get("/admin/stats", headers=auth_headers(client_account["access_token"]))
    assert response.status_code == 403


def test_profile_approval_publishes_nanny(client, db_session, admin_token, mock_send_email):
    account = signup(client, "nanny", email="new@example.com")
    nanny_id = nanny_id_for(db_session, account["user_id"])
    assert client.get("/nannies").json()["count"] == 0

    mock_send_email.reset_mock()
    response = client.put(
        f"/admin/nannies/{nanny_id}/approval", json={"approved": True}, headers=auth_headers(admin_token)
    )
    assert response.status_code == 200
    assert response.json()["profile_approved"] is True
    assert response.json()["notification"]["email_sent"] is True
    assert mock_send_email.await_args.kwargs["to"] == "new@example.com"
    assert client.get("/nannies").json()["count"] == 1


def test_admin_nanny_detail_includes_private_fields(client, admin_token, nanny_account):
    response = client.get(f"/admin/nannies/{nanny_account['nanny_id']}", headers=auth_headers(admin_token))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "nanny@example.com"
    assert {d["document_type"] for d in body["documents"]} == {
        "criminal_check",
        "credit_check",
        "proof_of_residence",
        "interview_video",
    }


def test_badge_toggle(client, admin_token, nanny_account):
    headers = auth_headers(admin_token)
    url = f"/admin/nannies/{nanny_account['nanny_id']}/badges"

    awarded = client.post(url, json={"badge": "training_cpr"}, headers=headers)
    assert awarded.json()["badges"]["training_cpr"] is True
    revoked = client.post(url, json={"badge": "training_cpr"}, headers=headers)
    assert revoked.json()["badges"]["training_cpr"] is False

    assert client.post(url, json={"badge": "training_swimming"}, headers=headers).status_code == 422


def test_unknown_nanny_is_404(client, admin_token):
    response = client.put(
        "/admin/nannies/missing/approval", json={"approved": True}, headers=auth_headers(admin_token)
    )
    assert response.status_code == 404
