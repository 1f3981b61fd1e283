import pytest
from pydantic import ValidationError

from symptomcheck import storage
from symptomcheck.schemas import ArticleCreate
from symptomcheck.seed import ARTICLES, seed_articles


def test_seed_articles_is_idempotent(db):
    assert seed_articles(db) == len(ARTICLES)
    assert seed_articles(db) == 0
    assert len(storage.get_articles(db)) == len(ARTICLES)


def test_list_articles_is_public(client, db):
    seed_articles(db)

    resp = client.get("/api/articles")

    assert resp.status_code == 200
    assert len(resp.json()) == len(ARTICLES)
    assert {"slug", "readTime", "featured", "category"} <= set(resp.json()[0])


def test_list_articles_by_category(client, db):
    seed_articles(db)

    resp = client.get("/api/articles", params={"category": "conditions"})

    assert {a["category"] for a in resp.json()} == {"conditions"}
    assert len(resp.json()) == 2


def test_search_articles_is_case_insensitive(client, db):
    seed_articles(db)

    resp = client.get("/api/articles", params={"q": "HYDRATION"})

    assert [a["slug"] for a in resp.json()] == ["hydration-basics"]


def test_get_article_by_slug(client, db):
    seed_articles(db)

    resp = client.get("/api/articles/hydration-basics")

    assert resp.status_code == 200
    assert resp.json()["title"] == "Hydration Basics"


def test_slug_lookup_is_case_sensitive(client, db):
    seed_articles(db)

    assert client.get("/api/articles/Hydration-Basics").status_code == 404


def test_unknown_slug_is_not_found(client):
    resp = client.get("/api/articles/no-such-article")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Article not found"}


def test_articles_newest_first(client, db):
    older = storage.create_article(db, ArticleCreate(title="Older", slug="older", category="wellness", content="a"))
    newer = storage.create_article(db, ArticleCreate(title="Newer", slug="newer", category="wellness", content="b"))

    slugs = [a["slug"] for a in client.get("/api/articles").json()]

    assert slugs == [newer.slug, older.slug]


def test_reset_database_recreates_and_seeds(monkeypatch, engine, session_factory, db):
    from symptomcheck import reset_db

    storage.create_article(db, ArticleCreate(title="Stale", slug="stale", category="wellness", content="x"))
    monkeypatch.setattr(reset_db, "engine", engine)
    monkeypatch.setattr(reset_db, "SessionLocal", session_factory)
    db.close()

    reset_db.reset_database()

    fresh = session_factory()
    try:
        slugs = {a.slug for a in storage.get_articles(fresh)}
    finally:
        fresh.close()
    assert "stale" not in slugs
    assert len(slugs) == len(ARTICLES)


def test_article_slug_must_be_url_safe():
    for slug in ("Bad Slug", "UPPER", "trailing-", "double--dash"):
        with pytest.raises(ValidationError):
            ArticleCreate(title="Bad", slug=slug, category="wellness", content="x")


def test_search_treats_wildcards_literally(client, db):
    storage.create_article(db, ArticleCreate(title="Older", slug="older", category="wellness", content="a"))
    storage.create_article(db, ArticleCreate(
        title="100% Juice Myths", slug="juice-myths", category="nutrition", content="b", excerpt="snake_case facts",
    ))

    assert [a["slug"] for a in client.get("/api/articles", params={"q": "_"}).json()] == ["juice-myths"]
    assert [a["slug"] for a in client.get("/api/articles", params={"q": "%"}).json()] == ["juice-myths"]
    assert client.get("/api/articles", params={"q": "o_d"}).json() == []
