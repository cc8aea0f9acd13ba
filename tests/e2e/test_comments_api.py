"""End-to-end tests for the comment HTTP API.

Runs the real FastAPI app on top of the in-memory store.
"""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from chorus.interface.api.app import create_app
from tests.di import build_test_container


@pytest.fixture
def client():
    app = create_app(build_test_container())
    with TestClient(app) as test_client:
        yield test_client


def post_comment(client: TestClient, **body) -> dict:
    response = client.post("/comments", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateComment:
    def test_create_returns_new_comment(self, client):
        body = post_comment(client, nickname="alice", text="hi")

        assert body["nickname"] == "alice"
        assert body["text"] == "hi"
        assert body["likes"] == 0
        assert body["edited"] is False
        assert body["parentId"] is None
        assert body["id"]
        assert body["createdAt"]

    def test_created_at_is_utc(self, client):
        body = post_comment(client, nickname="alice", text="hi")

        created_at = datetime.fromisoformat(body["createdAt"].replace("Z", "+00:00"))

        assert created_at.utcoffset() == timedelta(0)

    def test_create_reply(self, client):
        parent = post_comment(client, nickname="alice", text="hi")

        reply = post_comment(client, nickname="bob", text="yo", parentId=parent["id"])

        assert reply["parentId"] == parent["id"]

    @pytest.mark.parametrize(
        "body",
        [
            {"nickname": "", "text": "hi"},
            {"nickname": "alice", "text": "   "},
            {"nickname": "alice"},
            {},
        ],
    )
    def test_create_without_content_is_rejected(self, client, body):
        response = client.post("/comments", json=body)

        assert response.status_code == 400
        assert "error" in response.json()
        assert client.get("/comments").json()["totalComments"] == 0


class TestEditComment:
    def test_edit_marks_comment_edited(self, client):
        comment = post_comment(client, nickname="alice", text="hi")

        response = client.put(
            f"/comments/{comment['id']}", json={"nickname": "alice", "text": "hello"}
        )

        assert response.status_code == 200
        assert response.json()["text"] == "hello"
        assert response.json()["edited"] is True
        assert client.get(f"/comments/{comment['id']}").json()["edited"] is True

    def test_edit_unknown_comment_is_not_found(self, client):
        response = client.put(
            f"/comments/{uuid4()}", json={"nickname": "alice", "text": "hi"}
        )

        assert response.status_code == 404
        assert "error" in response.json()


class TestToggleLike:
    def test_like_then_unlike(self, client):
        comment = post_comment(client, nickname="alice", text="hi")

        first = client.post(f"/comments/{comment['id']}/like")
        second = client.post(f"/comments/{comment['id']}/like")

        assert first.json() == {"id": comment["id"], "likes": 1}
        assert second.json() == {"id": comment["id"], "likes": 0}

    def test_like_unknown_comment_is_not_found(self, client):
        response = client.post(f"/comments/{uuid4()}/like")

        assert response.status_code == 404


class TestDeleteComment:
    def test_delete_cascades_to_replies(self, client):
        parent = post_comment(client, nickname="p", text="parent")
        child = post_comment(client, nickname="c", text="child", parentId=parent["id"])
        grandchild = post_comment(
            client, nickname="g", text="grandchild", parentId=child["id"]
        )
        other = post_comment(client, nickname="o", text="other")

        response = client.delete(f"/comments/{parent['id']}")

        assert response.status_code == 200
        assert response.json() == {"id": parent["id"], "deleted": 3}
        for comment in (parent, child, grandchild):
            assert client.get(f"/comments/{comment['id']}").status_code == 404
        assert client.get(f"/comments/{other['id']}").status_code == 200

    def test_delete_unknown_comment_succeeds(self, client):
        missing = str(uuid4())

        response = client.delete(f"/comments/{missing}")

        assert response.status_code == 200
        assert response.json() == {"id": missing, "deleted": 0}


class TestListComments:
    def test_pagination(self, client):
        for i in range(25):
            post_comment(client, nickname="n", text=f"comment {i}")

        first = client.get("/comments", params={"page": 1, "limit": 10}).json()
        last = client.get("/comments", params={"page": 3, "limit": 10}).json()

        assert len(first["comments"]) == 10
        assert first["totalComments"] == 25
        assert first["totalPages"] == 3
        assert first["currentPage"] == 1
        assert len(last["comments"]) == 5
        assert first["comments"][0]["text"] == "comment 24"

    def test_defaults_to_first_page_of_ten(self, client):
        for i in range(12):
            post_comment(client, nickname="n", text=f"comment {i}")

        body = client.get("/comments").json()

        assert body["currentPage"] == 1
        assert len(body["comments"]) == 10

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
    def test_out_of_range_paging_is_rejected(self, client, params):
        response = client.get("/comments", params=params)

        assert response.status_code == 400
        assert "error" in response.json()


class TestMisc:
    def test_malformed_comment_id_is_rejected(self, client):
        response = client.get("/comments/not-a-uuid")

        assert response.status_code == 400
        assert "error" in response.json()

    def test_health_reports_observers(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["observers"] == 0
