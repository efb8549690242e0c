"""Tests for the admin dashboard endpoints."""

from __future__ import annotations

from fastapi import status
from fastapi.testclient import TestClient

from social_network.main import create_app
from social_network.models import Comment, Post, User


def _seed_activity(db_session, author: User, commenter: User) -> Post:
    post = Post(user_id=author.id, content="seed")
    db_session.add(post)
    db_session.flush()
    db_session.add(Comment(post_id=post.id, user_id=commenter.id, content="reply"))
    db_session.commit()
    return post


class TestStats:
    def test_counts(self, client, admin_headers, test_user, other_user, db_session) -> None:
        _seed_activity(db_session, test_user, other_user)
        response = client.get("/api/admin/stats", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "total_users": 3,
            "total_posts": 1,
            "total_comments": 1,
            "active_users_24h": 2,
        }

    def test_author_of_post_and_comment_counted_once(
        self, client, admin_headers, test_user, db_session
    ) -> None:
        _seed_activity(db_session, test_user, test_user)
        stats = client.get("/api/admin/stats", headers=admin_headers).json()
        assert stats["active_users_24h"] == 1

    def test_empty(self, client, admin_headers) -> None:
        stats = client.get("/api/admin/stats", headers=admin_headers).json()
        assert stats == {
            "total_users": 1,
            "total_posts": 0,
            "total_comments": 0,
            "active_users_24h": 0,
        }


def test_list_users(client, admin_headers, test_user) -> None:
    users = client.get("/api/admin/users", headers=admin_headers).json()
    by_email = {u["email"]: u for u in users}
    assert by_email["admin@example.com"]["is_admin"] is True
    assert by_email["alice@example.com"]["is_admin"] is False


class TestDeleteUser:
    def test_missing_id(self, client, admin_headers) -> None:
        response = client.delete("/api/admin/users/delete", headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_id(self, client, admin_headers) -> None:
        response = client.delete("/api/admin/users/delete?id=abc", headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_id(self, client, admin_headers) -> None:
        response = client.delete("/api/admin/users/delete?id=99999", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_cascades(
        self, client, admin_headers, test_user, other_user, db_session
    ) -> None:
        """Removing an account removes its posts and every comment on them."""
        user_id = test_user.id
        _seed_activity(db_session, test_user, other_user)
        db_session.expire_all()

        response = client.delete(f"/api/admin/users/delete?id={user_id}", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "User deleted successfully"}

        db_session.expire_all()
        assert db_session.get(User, user_id) is None
        assert db_session.query(Post).count() == 0
        assert db_session.query(Comment).count() == 0
        assert db_session.get(User, other_user.id) is not None


class TestEditUser:
    def test_edit(self, client, admin_headers, test_user, db_session) -> None:
        response = client.post(
            "/api/admin/users/edit",
            json={"id": test_user.id, "username": "renamed", "email": "renamed@example.com"},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "User updated successfully"}

        db_session.expire_all()
        user = db_session.get(User, test_user.id)
        assert (user.username, user.email) == ("renamed", "renamed@example.com")

    def test_unknown_user(self, client, admin_headers) -> None:
        response = client.post(
            "/api/admin/users/edit",
            json={"id": 99999, "username": "x", "email": "x@example.com"},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_email_taken(self, client, admin_headers, test_user, other_user) -> None:
        response = client.post(
            "/api/admin/users/edit",
            json={"id": test_user.id, "username": "alice", "email": other_user.email},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_409_CONFLICT


class TestBroadcast:
    def test_sends_in_background(self, app, admin_headers, email_sender) -> None:
        """The response comes back before delivery; shutdown waits for it."""
        with TestClient(app, base_url="http://test") as client:
            response = client.post(
                "/api/admin/broadcast-to-selected",
                data={
                    "subject": "Maintenance",
                    "body": "Down tonight",
                    "users[]": ["a@example.com", "b@example.com"],
                },
                headers=admin_headers,
            )
            assert response.status_code == status.HTTP_200_OK
            assert response.json() == {"success": True, "message": "Emails are being sent"}

        assert [m.to for m in email_sender.sent] == ["a@example.com", "b@example.com"]
        assert all(m.subject == "Maintenance" for m in email_sender.sent)
        assert all(m.attachment is None for m in email_sender.sent)

    def test_attachment_is_delivered_and_cleaned_up(
        self, app, admin_headers, email_sender
    ) -> None:
        with TestClient(app, base_url="http://test") as client:
            response = client.post(
                "/api/admin/broadcast-to-selected",
                data={"subject": "Report", "body": "Attached", "users[]": ["a@example.com"]},
                files={"attachment": ("q3 report.txt", b"figures", "text/plain")},
                headers=admin_headers,
            )
            assert response.status_code == status.HTTP_200_OK

        [message] = email_sender.sent
        assert message.attachment_bytes == b"figures"
        assert message.attachment.name.startswith("broadcast-")
        assert message.attachment.name.endswith("q3_report.txt")
        assert not message.attachment.exists()

    def test_one_failing_recipient(self, app, admin_headers, email_sender) -> None:
        email_sender.fail_for.add("bad@example.com")
        with TestClient(app, base_url="http://test") as client:
            client.post(
                "/api/admin/broadcast-to-selected",
                data={
                    "subject": "S",
                    "body": "B",
                    "users[]": ["bad@example.com", "good@example.com"],
                },
                headers=admin_headers,
            )
        assert [m.to for m in email_sender.sent] == ["bad@example.com", "good@example.com"]

    def test_requires_recipients(self, client, admin_headers) -> None:
        response = client.post(
            "/api/admin/broadcast-to-selected",
            data={"subject": "S", "body": "B"},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_attachment_size_limit(
        self, test_settings, engine, email_sender, admin_user
    ) -> None:
        settings = test_settings.model_copy(update={"broadcast_max_upload_bytes": 4})
        app = create_app(settings, engine=engine, email_sender=email_sender)
        token = app.state.token_service.issue(admin_user.id, True)
        with TestClient(app, base_url="http://test") as client:
            response = client.post(
                "/api/admin/broadcast-to-selected",
                data={"subject": "S", "body": "B", "users[]": ["a@example.com"]},
                files={"attachment": ("big.bin", b"0123456789", "application/octet-stream")},
                headers={"Authorization": f"Bearer {token}"},
            )
        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
