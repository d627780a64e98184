import sqlite3
from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from core.exceptions import ArticleNotFoundError, DuplicateArticleError, StoreFailure
from core.models.article import ArticleCreate, ArticleUpdate
from core.models.types import EntityKind
from core.utils.naming import make_file_base_name


def test_create_and_get(article_repo, make_payload):
    created = article_repo.create(make_payload(
        keywords=["ml", "nlp"], companies=["ACME"], rating=4, favorite=True,
    ))

    assert created.id == "0001"
    assert created.file_name == "0001 - Foo Bar"
    assert created.date_added == date.today().isoformat()
    assert created.created_at is not None
    assert created.updated_at == created.created_at
    assert created.names(EntityKind.AUTHOR) == ["A. Doe"]
    assert created.names(EntityKind.KEYWORD) == ["ml", "nlp"]
    assert created.names(EntityKind.COMPANY) == ["ACME"]
    assert created.rating == 4
    assert created.favorite is True
    assert created.read is False

    assert article_repo.get("0001") == created


def test_optional_fields_default_to_empty(article_repo, make_payload):
    article = article_repo.create(make_payload(journal=None))

    assert article.journal == ""
    assert article.doi == ""
    assert article.research_question == ""
    assert article.num_pages == 0
    assert article.language == "English"
    assert article.tags == []


def test_get_unknown_returns_none(article_repo):
    assert article_repo.get("9999") is None
    assert article_repo.get_title("9999") is None
    assert article_repo.exists("9999") is False


def test_required_fields_are_validated():
    with pytest.raises(ValidationError):
        ArticleCreate(title="   ", abstract="x", year=2020, date="2020")
    with pytest.raises(ValidationError):
        ArticleCreate(title="T", abstract="x", year=2020, date="2020", rating=6)
    with pytest.raises(ValidationError):
        ArticleCreate(abstract="x", year=2020, date="2020")


def test_duplicate_title_and_authors_rejected(article_repo, make_payload):
    original = article_repo.create(make_payload(authors=["A. Doe", "B. Roe"]))

    with pytest.raises(DuplicateArticleError) as excinfo:
        article_repo.create(make_payload(authors=["B. Roe", "A. Doe"]))
    assert excinfo.value.existing_id == original.id
    assert len(article_repo.list()) == 1
    # The rejected attempt must not burn an id
    assert article_repo.allocator.peek() == "0002"


def test_same_title_different_authors_allowed(article_repo, make_payload):
    article_repo.create(make_payload(authors=["A. Doe"]))
    other = article_repo.create(make_payload(authors=["A. Doe", "C. Poe"]))
    assert other.id == "0002"
    assert article_repo.find_duplicate("Foo Bar", ["C. Poe", "A. Doe"]) == "0002"
    assert article_repo.find_duplicate("Foo bar", ["A. Doe"]) is None


def test_failed_create_leaves_nothing_behind(article_repo, make_payload):
    with patch.object(article_repo.entities, "replace_links", side_effect=sqlite3.OperationalError("disk I/O error")):
        with pytest.raises(StoreFailure, match="disk I/O error"):
            article_repo.create(make_payload())

    assert article_repo.list() == []
    assert article_repo.allocator.peek() == "0001"


def test_update_only_touches_provided_fields(article_repo, make_payload):
    article = article_repo.create(make_payload(journal="Nature", keywords=["a"]))

    updated = article_repo.update(article.id, ArticleUpdate(read=True, rating=3))

    assert updated.read is True
    assert updated.rating == 3
    assert updated.journal == "Nature"
    assert updated.names(EntityKind.KEYWORD) == ["a"]
    assert updated.title == article.title


def test_empty_update_only_refreshes_timestamp(article_repo, make_payload, monkeypatch):
    article = article_repo.create(make_payload(keywords=["x"], notes="n"))
    monkeypatch.setattr(article_repo, "now", lambda: "2099-01-01T00:00:00")

    updated = article_repo.update(article.id, ArticleUpdate())

    assert updated.updated_at == "2099-01-01T00:00:00"
    assert updated.model_dump(exclude={"updated_at"}) == article.model_dump(exclude={"updated_at"})


def test_update_entity_list_replaces(article_repo, make_payload):
    article = article_repo.create(make_payload(keywords=["old1", "old2"]))

    article_repo.update(article.id, ArticleUpdate(keywords=["new"]))

    assert article_repo.get(article.id).names(EntityKind.KEYWORD) == ["new"]


def test_update_clears_optional_text_and_lists(article_repo, make_payload):
    article = article_repo.create(make_payload(doi="10.1/x", tags=["t"]))

    updated = article_repo.update(article.id, ArticleUpdate(doi=None, tags=[]))

    assert updated.doi == ""
    assert updated.tags == []


def test_update_rejects_clearing_required_fields():
    with pytest.raises(ValidationError):
        ArticleUpdate(title=None)
    with pytest.raises(ValidationError):
        ArticleUpdate(abstract="  ")
    with pytest.raises(ValidationError):
        ArticleUpdate(authors=None)


def test_update_unknown_raises_not_found(article_repo):
    with pytest.raises(ArticleNotFoundError) as excinfo:
        article_repo.update("0042", ArticleUpdate(read=True))
    assert excinfo.value.article_id == "0042"


def test_title_update_keeps_file_name(article_repo, make_payload):
    article = article_repo.create(make_payload())
    updated = article_repo.update(article.id, ArticleUpdate(title="Renamed"))
    assert updated.title == "Renamed"
    assert updated.file_name == "0001 - Foo Bar"


def test_file_name_matches_stored_document_name(article_repo, make_payload):
    created = article_repo.create(make_payload(title="What? Why/How_now"))

    assert created.file_name == "0001 - What- Why-How now"
    assert created.file_name == make_file_base_name(created.id, created.title)


def test_delete_removes_links_but_keeps_entities(memory_db, article_repo, make_payload):
    article = article_repo.create(make_payload(keywords=["k"], universities=["MIT"]))

    assert article_repo.delete(article.id) is True

    assert article_repo.get(article.id) is None
    assert memory_db.fetch_one("SELECT COUNT(*) FROM ArticleAuthor")[0] == 0
    assert memory_db.fetch_one("SELECT COUNT(*) FROM ArticleKeyword")[0] == 0
    assert memory_db.fetch_one("SELECT COUNT(*) FROM Author")[0] == 1
    assert memory_db.fetch_one("SELECT COUNT(*) FROM University")[0] == 1
    assert article_repo.delete(article.id) is False


def test_list_and_titles(article_repo, make_payload):
    article_repo.create(make_payload(title="One"))
    article_repo.create(make_payload(title="Two"))

    assert {a.id for a in article_repo.list()} == {"0001", "0002"}
    assert article_repo.list_ids_and_titles() == [("0001", "One"), ("0002", "Two")]


def test_ids_strictly_increase_with_deletes(article_repo, make_payload):
    ids = []
    for i in range(5):
        article = article_repo.create(make_payload(title=f"Paper {i}"))
        ids.append(article.id)
        if i % 2 == 0:
            article_repo.delete(article.id)
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)
