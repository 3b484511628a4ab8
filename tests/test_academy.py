import pytest
from conftest import auth_headers, signup


@pytest.fixture
def videos(client, admin_token) -> list[str]:
    ids = []
    for index, title in enumerate(["Safe sleep", "Meal prep", "First aid basics"]):
        response = client.post(
            "/admin/academy/videos",
            json={"title": title, "video_url": f"https://videos.example.com/{index}", "order_index": index},
            headers=auth_headers(admin_token),
        )
        assert response.status_code == 201, response.text
        ids.append(response.json()["id"])
    return ids


def test_videos_listed_in_order_with_progress(client, videos):
    nanny = signup(client, "nanny")
    headers = auth_headers(nanny["access_token"])
    client.post(f"/academy/videos/{videos[1]}/complete", headers=headers)

    body = client.get("/academy/videos", headers=headers).json()
    assert [v["title"] for v in body["videos"]] == ["Safe sleep", "Meal prep", "First aid basics"]
    assert [v["completed"] for v in body["videos"]] == [False, True, False]
    assert body["completed_count"] == 1
    assert body["academy_completed"] is False


def test_completing_all_videos_completes_academy(client, videos):
    nanny = signup(client, "nanny")
    headers = auth_headers(nanny["access_token"])

    for video_id in videos:
        response = client.post(f"/academy/videos/{video_id}/complete", headers=headers)
    assert response.json()["academy_completed"] is True

    profile = client.get("/profiles/nanny", headers=headers).json()
    assert profile["academy_completed"] is True


def test_mark_complete_is_idempotent(client, videos):
    nanny = signup(client, "nanny")
    headers = auth_headers(nanny["access_token"])
    client.post(f"/academy/videos/{videos[0]}/complete", headers=headers)
    response = client.post(f"/academy/videos/{videos[0]}/complete", headers=headers)
    assert response.status_code == 200
    assert response.json()["completed_count"] == 1


def test_inactive_or_unknown_video_is_404(client, videos, admin_token):
    nanny = signup(client, "nanny")
    headers = auth_headers(nanny["access_token"])

    client.post(f"/admin/academy/videos/{videos[2]}/toggle", headers=auth_headers(admin_token))
    assert client.post(f"/academy/videos/{videos[2]}/complete", headers=headers).status_code == 404
    assert client.post("/academy/videos/unknown/complete", headers=headers).status_code == 404

    # Two active videos remain; finishing them completes the academy
    client.post(f"/academy/videos/{videos[0]}/complete", headers=headers)
    response = client.post(f"/academy/videos/{videos[1]}/complete", headers=headers)
    assert response.json()["total_count"] == 2
    assert response.json()["academy_completed"] is True


def test_admin_deletes_video(client, videos, admin_token):
    response = client.delete(f"/admin/academy/videos/{videos[0]}", headers=auth_headers(admin_token))
    assert response.status_code == 204
    assert len(client.get("/admin/academy/videos", headers=auth_headers(admin_token)).json()) == 2


def test_clients_cannot_mark_progress(client, videos, client_account):
    response = client.post(
        f"/academy/videos/{videos[0]}/complete", headers=auth_headers(client_account["access_token"])
    )
    assert response.status_code == 403


def test_video_url_must_be_http(client, admin_token):
    response = client.post(
        "/admin/academy/videos",
        json={"title": "Bad", "video_url": "javascript:alert(1)"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 422
