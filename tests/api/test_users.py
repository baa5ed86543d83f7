"""Tests for the users router."""

from src.bookshelf.entities import FavoriteRepository, UserRepository


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestCreateUser:
    def test_create_user(self, client):
        response = client.post(
            "/api/users",
            json={"username": "alice", "email": "a@b.com", "password": "secret1"},
        )

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "username", "email", "createdAt"}
        assert body["username"] == "alice"

    def test_registered_user_can_log_in(self, client):
        client.post(
            "/api/users",
            json={"username": "alice", "email": "a@b.com", "password": "secret1"},
        )

        response = client.post(
            "/api/auth/login", json={"email": "a@b.com", "password": "secret1"}
        )

        assert response.status_code == 200

    def test_duplicate_email_conflicts(self, client, make_user, db_session):
        make_user(username="alice", email="a@b.com")

        response = client.post(
            "/api/users",
            json={"username": "alice2", "email": "a@b.com", "password": "secret1"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Username or email already exists."
        assert UserRepository(db_session).count() == 1

    def test_duplicate_username_conflicts(self, client, make_user, db_session):
        make_user(username="alice", email="a@b.com")

        response = client.post(
            "/api/users",
            json={"username": "alice", "email": "other@mail.com", "password": "secret1"},
        )

        assert response.status_code == 409
        assert UserRepository(db_session).count() == 1

    def test_validation(self, client, db_session):
        response = client.post(
            "/api/users", json={"username": "al", "email": "nope", "password": "123"}
        )

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"body.username", "body.email", "body.password"}
        assert UserRepository(db_session).count() == 0


class TestReadUsers:
    def test_list_requires_session(self, client):
        assert client.get("/api/users").status_code == 401

    def test_list_newest_first_without_hashes(self, client, make_user, login):
        make_user(username="alice", email="alice@mail.com")
        make_user(username="bob", email="bob@mail.com")

        response = client.get("/api/users", headers=_bearer(login()))

        assert response.status_code == 200
        users = response.json()
        assert [user["username"] for user in users] == ["bob", "alice"]
        assert all("passwordHash" not in user for user in users)

    def test_get_user(self, client, auth_headers, make_user):
        bob = make_user(username="bob", email="bob@mail.com")

        response = client.get(f"/api/users/{bob.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "bob@mail.com"

    def test_get_unknown_user(self, client, auth_headers):
        response = client.get("/api/users/9999", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_non_integer_id(self, client, auth_headers):
        response = client.get("/api/users/abc", headers=auth_headers)

        assert response.status_code == 400


class TestUpdateUser:
    def test_owner_can_update(self, client, make_user, login):
        alice = make_user()
        headers = _bearer(login())

        response = client.put(
            f"/api/users/{alice.id}", json={"username": "alicia"}, headers=headers
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "username", "email", "updatedAt"}
        assert body["username"] == "alicia"
        assert body["email"] == "alice@mail.com"

    def test_password_change(self, client, make_user, login):
        alice = make_user()
        headers = _bearer(login())

        client.put(
            f"/api/users/{alice.id}", json={"password": "new-secret"}, headers=headers
        )

        old = client.post(
            "/api/auth/login", json={"email": "alice@mail.com", "password": "secret1"}
        )
        new = client.post(
            "/api/auth/login", json={"email": "alice@mail.com", "password": "new-secret"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    def test_other_users_are_forbidden(self, client, make_user, login, db_session):
        make_user()
        bob = make_user(username="bob", email="bob@mail.com")
        headers = _bearer(login())

        response = client.put(
            f"/api/users/{bob.id}", json={"username": "hacked"}, headers=headers
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden"
        assert UserRepository(db_session).get(bob.id).username == "bob"

    def test_update_to_taken_email_conflicts(self, client, make_user, login, db_session):
        alice = make_user()
        make_user(username="bob", email="bob@mail.com")
        headers = _bearer(login())

        response = client.put(
            f"/api/users/{alice.id}", json={"email": "bob@mail.com"}, headers=headers
        )

        assert response.status_code == 409
        assert UserRepository(db_session).get(alice.id).email == "alice@mail.com"

    def test_other_users_are_forbidden_before_body_validation(
        self, client, make_user, login, db_session
    ):
        make_user()
        bob = make_user(username="bob", email="bob@mail.com")
        headers = _bearer(login())

        response = client.put(
            f"/api/users/{bob.id}", json={"username": "x"}, headers=headers
        )

        assert response.status_code == 403
        assert UserRepository(db_session).get(bob.id).username == "bob"

    def test_explicit_null_is_rejected(self, client, make_user, login, db_session):
        alice = make_user()
        headers = _bearer(login())

        response = client.put(
            f"/api/users/{alice.id}", json={"email": None}, headers=headers
        )

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"body.email"}
        assert UserRepository(db_session).get(alice.id).email == "alice@mail.com"

    def test_requires_session(self, client, make_user):
        alice = make_user()

        response = client.put(f"/api/users/{alice.id}", json={"username": "alicia"})

        assert response.status_code == 401


class TestDeleteUser:
    def test_owner_can_delete(self, client, make_user, login, db_session):
        alice = make_user()
        headers = _bearer(login())

        response = client.delete(f"/api/users/{alice.id}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "User deleted",
            "id": alice.id,
        }
        assert UserRepository(db_session).get(alice.id) is None

    def test_other_users_are_forbidden(self, client, make_user, login, db_session):
        make_user()
        bob = make_user(username="bob", email="bob@mail.com")

        response = client.delete(f"/api/users/{bob.id}", headers=_bearer(login()))

        assert response.status_code == 403
        assert UserRepository(db_session).get(bob.id) is not None

    def test_foreign_id_forbidden_even_when_unknown(self, client, make_user, login):
        make_user()

        response = client.delete("/api/users/9999", headers=_bearer(login()))

        assert response.status_code == 403

    def test_delete_cascades_to_favorites(
        self, client, make_user, make_book, login, db_session
    ):
        alice = make_user()
        book = make_book()
        headers = _bearer(login())
        client.post("/api/favorites", json={"bookId": book.id}, headers=headers)

        response = client.delete(f"/api/users/{alice.id}", headers=headers)

        assert response.status_code == 200
        assert FavoriteRepository(db_session).exists(alice.id, book.id) is False
