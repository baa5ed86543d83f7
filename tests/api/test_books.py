"""Tests for the books router."""


class TestCreateBook:
    def test_create_book(self, client, auth_headers):
        response = client.post(
            "/api/books",
            json={
                "title": "Dune",
                "author": "Frank Herbert",
                "isbn": "9780441013593",
                "publishedDate": "1965-08-01T00:00:00Z",
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Dune"
        assert body["isbn"] == "9780441013593"
        assert body["publishedDate"].startswith("1965-08-01")
        assert {"id", "createdAt", "updatedAt"} <= set(body)

    def test_requires_session(self, client):
        response = client.post(
            "/api/books", json={"title": "Dune", "author": "Frank Herbert"}
        )

        assert response.status_code == 401

    def test_duplicate_isbn_conflicts(self, client, auth_headers, make_book):
        make_book(isbn="9780441013593")

        response = client.post(
            "/api/books",
            json={"title": "Dune", "author": "Frank Herbert", "isbn": "9780441013593"},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Book with this ISBN already exists."

    def test_validation(self, client, auth_headers):
        response = client.post(
            "/api/books", json={"title": "", "author": "X"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body.title"


class TestReadBooks:
    def test_list_is_public_and_newest_first(self, client, make_book):
        make_book(title="First")
        make_book(title="Second")

        response = client.get("/api/books")

        assert response.status_code == 200
        assert [book["title"] for book in response.json()] == ["Second", "First"]

    def test_list_defaults_to_ten(self, client, make_book):
        for n in range(12):
            make_book(title=f"Book {n}")

        assert len(client.get("/api/books").json()) == 10

    def test_list_pagination_and_query(self, client, make_book):
        make_book(title="The Hobbit")
        make_book(title="Dune")
        make_book(title="Hobbit Companion")

        found = client.get("/api/books", params={"query": "HOBBIT"}).json()
        paged = client.get("/api/books", params={"limit": 1, "offset": 1}).json()

        assert [book["title"] for book in found] == ["Hobbit Companion", "The Hobbit"]
        assert [book["title"] for book in paged] == ["Dune"]

    def test_get_book(self, client, make_book):
        book = make_book()

        response = client.get(f"/api/books/{book.id}")

        assert response.status_code == 200
        assert response.json()["author"] == "Frank Herbert"

    def test_unknown_book(self, client):
        response = client.get("/api/books/9999")

        assert response.status_code == 404
        assert response.json()["message"] == "Book not found"

    def test_non_integer_id(self, client):
        assert client.get("/api/books/dune").status_code == 400


class TestUpdateBook:
    def test_partial_update(self, client, auth_headers, make_book):
        book = make_book(isbn="123")

        response = client.put(
            f"/api/books/{book.id}", json={"title": "Dune Messiah"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Dune Messiah"
        assert body["author"] == "Frank Herbert"
        assert body["isbn"] == "123"

    def test_clearing_published_date(self, client, auth_headers):
        created = client.post(
            "/api/books",
            json={
                "title": "Dune",
                "author": "Frank Herbert",
                "publishedDate": "1965-08-01T00:00:00Z",
            },
            headers=auth_headers,
        ).json()

        response = client.put(
            f"/api/books/{created['id']}",
            json={"publishedDate": None},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["publishedDate"] is None

    def test_unknown_book(self, client, auth_headers):
        response = client.put(
            "/api/books/9999", json={"title": "Ghost"}, headers=auth_headers
        )

        assert response.status_code == 404

    def test_duplicate_isbn_conflicts(self, client, auth_headers, make_book):
        make_book(title="A", isbn="111")
        other = make_book(title="B", isbn="222")

        response = client.put(
            f"/api/books/{other.id}", json={"isbn": "111"}, headers=auth_headers
        )

        assert response.status_code == 409


class TestDeleteBook:
    def test_delete_book(self, client, auth_headers, make_book):
        book = make_book()

        response = client.delete(f"/api/books/{book.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Book deleted", "id": book.id}
        assert client.get(f"/api/books/{book.id}").status_code == 404

    def test_unknown_book(self, client, auth_headers):
        assert client.delete("/api/books/9999", headers=auth_headers).status_code == 404

    def test_requires_session(self, client, make_book):
        book = make_book()

        assert client.delete(f"/api/books/{book.id}").status_code == 401
