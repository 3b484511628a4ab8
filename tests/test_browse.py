from datetime import date
from types import SimpleNamespace

import pytest
from conftest import approve_nanny, auth_headers, signup

from nannyplacements.domain.nannies.filters import (
    NannyFilters,
    calculate_age,
    matches_in_memory,
    parse_languages,
)
from nannyplacements.models import Review

# =============================================================================
# Filter parsing and in-memory checks
# =============================================================================


def test_all_and_blank_mean_no_filter():
    filters = NannyFilters(city="all", experience_type=" ", languages="all,English, ")
    assert filters.city is None
    assert filters.experience_type is None
    assert filters.languages == ["English"]


def test_unknown_age_range_rejected():
    with pytest.raises(ValueError):
        NannyFilters(age_range="18-20")


def test_parse_languages_accepts_list_or_csv():
    assert parse_languages("English,Zulu") == ["English", "Zulu"]
    assert parse_languages(["Sotho", ""]) == ["Sotho"]
    assert parse_languages(None) == []


def test_calculate_age_before_and_after_birthday():
    dob = date(1990, 6, 15)
    assert calculate_age(dob, today=date(2020, 6, 14)) == 29
    assert calculate_age(dob, today=date(2020, 6, 15)) == 30
    assert calculate_age(None) is None


def test_languages_must_all_be_spoken():
    nanny = SimpleNamespace(languages=["English", "Zulu"], date_of_birth=None)
    assert matches_in_memory(nanny, NannyFilters(languages="English,Zulu"))
    assert not matches_in_memory(nanny, NannyFilters(languages="English,Afrikaans"))


def test_age_range_is_inclusive_and_excludes_unknown_age():
    today = date(2020, 1, 1)
    thirty = SimpleNamespace(languages=[], date_of_birth=date(1990, 1, 1))
    unknown = SimpleNamespace(languages=[], date_of_birth=None)
    assert matches_in_memory(thirty, NannyFilters(age_range="25-30"), today=today)
    assert matches_in_memory(thirty, NannyFilters(age_range="30-35"), today=today)
    assert not matches_in_memory(thirty, NannyFilters(age_range="35-40"), today=today)
    assert not matches_in_memory(unknown, NannyFilters(age_range="25-30"), today=today)


# =============================================================================
# Browse API
# =============================================================================


def test_only_approved_nannies_are_listed(client, nanny_account):
    signup(client, "nanny", email="pending@example.com")

    response = client.get("/nannies")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    listed = body["nannies"][0]
    assert listed["id"] == nanny_account["nanny_id"]
    assert "email" not in listed
    assert "phone" not in listed
    assert "account_number" not in listed


def test_admin_sees_unapproved_nannies(client, nanny_account, admin_token):
    signup(client, "nanny", email="pending@example.com")
    response = client.get("/nannies", headers=auth_headers(admin_token))
    assert response.json()["count"] == 2


def test_filters_apply(client, nanny_account):
    assert client.get("/nannies?city=cape").json()["count"] == 1
    assert client.get("/nannies?city=Johannesburg").json()["count"] == 0
    assert client.get("/nannies?max_rate=50").json()["count"] == 0
    assert client.get("/nannies?languages=Zulu").json()["count"] == 1
    assert client.get("/nannies?languages=Zulu,Venda").json()["count"] == 0
    assert client.get("/nannies?accommodation=stay_out").json()["count"] == 0
    assert client.get("/nannies?employment_type=full_time&accommodation=live_in").json()["count"] == 1


def test_invalid_age_range_is_bad_request(client):
    assert client.get("/nannies?age_range=99-100").status_code == 400


def test_cleaners_listing(client, db_session, nanny_account):
    cleaner = signup(client, "nanny", email="cleaner@example.com", experience_type="cleaning")
    approve_nanny(db_session, cleaner["user_id"])

    body = client.get("/cleaners").json()
    assert body["count"] == 1
    assert body["nannies"][0]["experience_type"] == "cleaning"


def test_get_unapproved_nanny_is_404(client, db_session):
    pending = signup(client, "nanny", email="pending@example.com")
    from nannyplacements.models import Nanny

    nanny_id = db_session.query(Nanny).filter(Nanny.user_id == pending["user_id"]).one().id
    assert client.get(f"/nannies/{nanny_id}").status_code == 404


def test_rating_summary_excludes_dismissed(client, db_session, nanny_account, client_account):
    from nannyplacements.models import Client

    client_row = db_session.query(Client).filter(Client.user_id == client_account["user_id"]).one()
    other = signup(client, "client", email="other@example.com")
    other_row = db_session.query(Client).filter(Client.user_id == other["user_id"]).one()
    db_session.add_all(
        [
            Review(nanny_id=nanny_account["nanny_id"], client_id=client_row.id, rating=4, status="pending"),
            Review(nanny_id=nanny_account["nanny_id"], client_id=other_row.id, rating=1, status="dismissed"),
        ]
    )
    db_session.commit()

    body = client.get(f"/nannies/{nanny_account['nanny_id']}").json()
    assert body["average_rating"] == 4.0
    assert body["review_count"] == 1


def test_auto_match_uses_client_preferences(client, nanny_account, client_account):
    headers = auth_headers(client_account["access_token"])
    client.put("/profiles/client", json={"preferred_accommodation_type": "live_in"}, headers=headers)

    response = client.get("/nannies/auto-match", headers=headers)
    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["filters"] == {"accommodation": "live_in"}

    client.put("/profiles/client", json={"preferred_accommodation_type": "stay_out"}, headers=headers)
    assert client.get("/nannies/auto-match", headers=headers).json()["count"] == 0
