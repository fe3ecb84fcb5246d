"""Tests for the server-rendered home page."""

from posts import repository as post_repository


class TestHomePage:

    def test_lists_recent_posts(self, client, store):
        author = store.add_user("w@example.com", name="Writer")
        store.add_post("Hello <world>", "First & only", author_id=author["id"])
        store.add_post("Anonymous", "no author")

        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        html = resp.text
        assert "Hello &lt;world&gt;" in html
        assert "First &amp; only" in html
        assert "Author: Writer" in html
        assert "Author: Unknown" in html
        assert html.index("Anonymous") < html.index("Hello &lt;world&gt;")

    def test_author_without_name(self, client, store):
        author = store.add_user("nameless@example.com")
        store.add_post("Post", "Body", author_id=author["id"])
        assert "Author: Unknown" in client.get("/").text

    def test_only_ten_posts(self, client, store):
        for i in range(12):
            store.add_post(f"post-{i:02d}", "body")
        html = client.get("/").text
        assert html.count("<li ") == 10
        assert "post-11" in html
        assert "post-01" not in html

    def test_no_posts(self, client, store):
        assert "No posts found." in client.get("/").text

    def test_load_failure_is_rendered(self, client, store, monkeypatch):
        async def broken(**kwargs):
            raise RuntimeError("DATABASE_URI or DATABASE_URL is not set.")

        monkeypatch.setattr(post_repository, "list_posts", broken)
        resp = client.get("/")
        assert resp.status_code == 200
        assert "Failed to load posts." in resp.text
        assert "DATABASE_URI" not in resp.text
