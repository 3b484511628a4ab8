from conftest import auth_headers, signup

from nannyplacements.models import Review


def submit(client, account, nanny_id, **payload):
    return client.post(
        "/reviews",
        json={"nanny_id": nanny_id, **payload},
        headers=auth_headers(account["access_token"]),
    )


def test_rating_review_notifies_admin(client, client_account, nanny_account, mock_send_email):
    mock_send_email.reset_mock()
    response = submit(client, client_account, nanny_account["nanny_id"], rating=5)

    assert response.status_code == 201, response.text
    assert response.json()["is_complaint"] is False
    assert response.json()["status"] == "pending"
    assert mock_send_email.await_args.kwargs["to"] == "admin@nannyplacementssouthafrica.co.za"


def test_complaint_without_rating(client, client_account, nanny_account):
    response = submit(client, client_account, nanny_account["nanny_id"], complaint_text="Arrived late twice")
    assert response.status_code == 201
    assert response.json()["is_complaint"] is True
    assert response.json()["rating"] is None


def test_empty_review_rejected(client, client_account, nanny_account):
    assert submit(client, client_account, nanny_account["nanny_id"], complaint_text="  ").status_code == 422
    assert submit(client, client_account, nanny_account["nanny_id"], rating=6).status_code == 422


def test_one_review_per_client_and_nanny(client, client_account, nanny_account):
    submit(client, client_account, nanny_account["nanny_id"], rating=4)
    assert submit(client, client_account, nanny_account["nanny_id"], rating=2).status_code == 409


def test_status_update_emails_nanny_only_for_low_ratings(
    client, client_account, nanny_account, admin_token, mock_send_email
):
    other = signup(client, "client", email="other@example.com")
    good = submit(client, client_account, nanny_account["nanny_id"], rating=5).json()["id"]
    poor = submit(client, other, nanny_account["nanny_id"], rating=2).json()["id"]

    mock_send_email.reset_mock()
    client.put(
        f"/admin/reviews/{good}/status", json={"status": "resolved"}, headers=auth_headers(admin_token)
    )
    assert [c.kwargs["to"] for c in mock_send_email.await_args_list] == ["client@example.com"]

    mock_send_email.reset_mock()
    response = client.put(
        f"/admin/reviews/{poor}/status",
        json={"status": "resolved", "admin_response": "We spoke to both parties"},
        headers=auth_headers(admin_token),
    )
    assert response.json()["admin_response"] == "We spoke to both parties"
    assert [c.kwargs["to"] for c in mock_send_email.await_args_list] == [
        "other@example.com",
        "nanny@example.com",
    ]


def test_admin_list_filters(client, client_account, nanny_account, admin_token):
    other = signup(client, "client", email="other@example.com", first_name="Pieter")
    submit(client, client_account, nanny_account["nanny_id"], rating=4)
    complaint = submit(client, other, nanny_account["nanny_id"], complaint_text="No show").json()["id"]
    headers = auth_headers(admin_token)

    complaints = client.get("/admin/reviews?type=complaint", headers=headers).json()
    assert [r["id"] for r in complaints] == [complaint]
    assert complaints[0]["client_name"] == "Pieter van Wyk"

    assert len(client.get("/admin/reviews?search=pieter", headers=headers).json()) == 1
    assert client.get("/admin/reviews?type=other", headers=headers).status_code == 400

    client.post(f"/admin/reviews/{complaint}/archive", headers=headers)
    assert len(client.get("/admin/reviews", headers=headers).json()) == 1
    assert len(client.get("/admin/reviews?status=archived", headers=headers).json()) == 1


def test_invalid_review_status(client, client_account, nanny_account, admin_token):
    review_id = submit(client, client_account, nanny_account["nanny_id"], rating=3).json()["id"]
    response = client.put(
        f"/admin/reviews/{review_id}/status", json={"status": "deleted"}, headers=auth_headers(admin_token)
    )
    assert response.status_code == 422


def test_markup_only_complaint_rejected(client, db_session, client_account, nanny_account):
    response = submit(client, client_account, nanny_account["nanny_id"], complaint_text="<b></b>")
    assert response.status_code == 400
    assert db_session.query(Review).count() == 0


def test_status_update_on_review_without_rating_or_text(client, db_session, client_account, nanny_account, admin_token):
    review_id = submit(client, client_account, nanny_account["nanny_id"], rating=4).json()["id"]
    db_session.query(Review).filter(Review.id == review_id).update({"rating": None})
    db_session.commit()

    response = client.put(
        f"/admin/reviews/{review_id}/status", json={"status": "dismissed"}, headers=auth_headers(admin_token)
    )
    assert response.status_code == 200
