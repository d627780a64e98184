import pytest


def test_first_ids_are_zero_padded(allocator):
    assert allocator.next_article_id() == "0001"
    assert allocator.next_article_id() == "0002"


def test_peek_does_not_consume(allocator):
    assert allocator.peek() == "0001"
    assert allocator.peek() == "0001"
    assert allocator.next_article_id() == "0001"
    assert allocator.peek() == "0002"


def test_seeds_from_existing_articles(memory_db, allocator, insert_article_row):
    conn = memory_db.connection
    insert_article_row(conn, "0041")
    insert_article_row(conn, "0007")
    conn.execute("DELETE FROM IdCounter")

    assert allocator.peek() == "0042"
    assert allocator.next_article_id() == "0042"
    assert allocator.next_article_id() == "0043"


def test_ids_not_reused_after_delete(memory_db, article_repo, make_payload):
    first = article_repo.create(make_payload(title="First"))
    second = article_repo.create(make_payload(title="Second"))
    article_repo.delete(second.id)
    third = article_repo.create(make_payload(title="Third"))

    assert [first.id, second.id, third.id] == ["0001", "0002", "0003"]


def test_rolled_back_allocation_is_not_consumed(memory_db, allocator):
    with pytest.raises(ValueError):
        with memory_db.transaction():
            assert allocator.next_article_id() == "0001"
            raise ValueError("create failed")
    assert allocator.next_article_id() == "0001"


def test_width_grows_past_four_digits(memory_db, allocator):
    memory_db.connection.execute("UPDATE IdCounter SET nextId = 10000 WHERE name = 'article'")
    assert allocator.next_article_id() == "10000"
