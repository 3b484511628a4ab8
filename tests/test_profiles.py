from conftest import auth_headers, signup


def test_client_updates_preferences(client, client_account):
    headers = auth_headers(client_account["access_token"])
    response = client.put(
        "/profiles/client",
        json={
            "description": "<b>Two</b> kids in Rondebosch",
            "preferred_employment_type": "full_time",
            "preferred_accommodation_type": "stay_out",
        },
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["description"] == "Two kids in Rondebosch"
    assert body["preferred_accommodation_type"] == "stay_out"

    assert client.get("/profiles/client", headers=headers).json()["preferred_employment_type"] == "full_time"


def test_client_preference_must_be_known_value(client, client_account):
    response = client.put(
        "/profiles/client",
        json={"preferred_accommodation_type": "sleep_over"},
        headers=auth_headers(client_account["access_token"]),
    )
    assert response.status_code == 422


def test_nanny_profile_update_and_masked_bank_details(client):
    account = signup(client, "nanny")
    headers = auth_headers(account["access_token"])

    response = client.put(
        "/profiles/nanny",
        json={
            "bio": "Ten years with toddlers",
            "hourly_rate": 55,
            "languages": ["English", "Xhosa", "English"],
            "date_of_birth": "1988-02-01",
            "education_level": "matric",
            "experience_duration": 10,
        },
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["languages"] == ["English", "Xhosa"]
    assert body["account_number_masked"] == "*******6789"
    assert "account_number" not in body
    assert body["profile_approved"] is False


def test_nanny_profile_rejects_unknown_language(client):
    account = signup(client, "nanny")
    response = client.put(
        "/profiles/nanny",
        json={"languages": ["Klingon"]},
        headers=auth_headers(account["access_token"]),
    )
    assert response.status_code == 422


def test_nanny_profile_rejects_future_birth_date(client):
    account = signup(client, "nanny")
    response = client.put(
        "/profiles/nanny",
        json={"date_of_birth": "2999-01-01"},
        headers=auth_headers(account["access_token"]),
    )
    assert response.status_code == 422


def test_profile_endpoints_enforce_role(client, client_account):
    response = client.get("/profiles/nanny", headers=auth_headers(client_account["access_token"]))
    assert response.status_code == 403
