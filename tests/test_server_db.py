import pytest

from cyberfish.server_db import Database


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


def test_empty(db):
    assert db.get_scores() == []
    assert not db.name_exists("A")


def test_keeps_maximum(db):
    assert db.upsert_score("A", 10)
    assert not db.upsert_score("A", 7)
    assert [r.score for r in db.get_scores()] == [10]
    assert db.upsert_score("A", 15)
    assert [r.score for r in db.get_scores()] == [15]


def test_equal_score_keeps_first_date(db):
    db.upsert_score("A", 10, date="2024-01-01T00:00:00.000+00:00")
    assert not db.upsert_score("A", 10, date="2025-01-01T00:00:00.000+00:00")
    assert db.get_scores()[0].date == "2024-01-01T00:00:00.000+00:00"


def test_one_record_per_name_ranked(db):
    db.upsert_score("A", 3)
    db.upsert_score("B", 9)
    db.upsert_score("C", 5)
    db.upsert_score("A", 4)
    assert [(r.name, r.score) for r in db.get_scores()] == [("B", 9), ("C", 5), ("A", 4)]
    assert db.name_exists("C")
