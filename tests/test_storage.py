"""
Tests for database.py and the SQLite candidate store.
"""

import pytest

from hirefunnel.database import CandidateRecord, get_session_factory, init_database
from hirefunnel.errors import ConflictError, NotFoundError
from hirefunnel.models import AdminData, IntakeQuestionnaire, PipelineStage


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Test that init_database creates the candidates table."""
        db_path = tmp_path / "test.db"
        init_database(db_path)

        Session = get_session_factory(db_path)
        with Session() as session:
            assert session.query(CandidateRecord).count() == 0

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that init_database creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(db_path)

        assert db_path.exists()


class TestCandidateStore:
    """CRUD through CandidateStore."""

    def test_upsert_and_get(self, store, candidate_factory):
        saved = store.upsert(candidate_factory())
        assert saved.revision == 1

        loaded = store.get_by_id(saved.id)
        assert loaded == saved

    def test_json_columns_round_trip(self, store, candidate_factory, best_assessment):
        c = candidate_factory(
            admin_data=AdminData(tags=["Follow up"], pipeline_stage=PipelineStage.SCREENING),
            applicant_questionnaire=IntakeQuestionnaire(occupation="Student", extra={"referral": "friend"}),
            assessment=best_assessment,
        )
        store.upsert(c)
        loaded = store.get_by_id(c.id)
        assert loaded.admin_data.tags == ["Follow up"]
        assert loaded.admin_data.pipeline_stage == PipelineStage.SCREENING
        assert loaded.applicant_questionnaire.extra == {"referral": "friend"}
        assert loaded.assessment == best_assessment

    def test_upsert_overwrites_and_bumps_revision(self, store, saved_candidate):
        updated = store.upsert(saved_candidate.evolve(city="Halifax"))
        assert updated.revision == 2
        assert store.get_by_id(saved_candidate.id).city == "Halifax"

    def test_get_missing_returns_none(self, store):
        assert store.get_by_id("NOPE0000") is None

    def test_get_by_email_case_insensitive_newest(self, store, candidate_factory):
        store.upsert(candidate_factory("AAAAAAAA", email="dup@example.com", timestamp="2025-01-01T00:00:00.000Z"))
        store.upsert(candidate_factory("BBBBBBBB", email="dup@example.com", timestamp="2025-03-01T00:00:00.000Z"))
        assert store.get_by_email("DUP@Example.com").id == "BBBBBBBB"

    def test_get_by_blank_email(self, store, saved_candidate):
        assert store.get_by_email("   ") is None

    def test_list_newest_first(self, store, candidate_factory):
        store.upsert(candidate_factory("AAAAAAAA", email="a@x.ca", timestamp="2025-01-01T00:00:00.000Z"))
        store.upsert(candidate_factory("CCCCCCCC", email="c@x.ca", timestamp="2025-05-01T00:00:00.000Z"))
        store.upsert(candidate_factory("BBBBBBBB", email="b@x.ca", timestamp="2025-03-01T00:00:00.000Z"))
        assert [c.id for c in store.list()] == ["CCCCCCCC", "BBBBBBBB", "AAAAAAAA"]

    def test_delete(self, store, saved_candidate):
        store.delete(saved_candidate.id)
        assert store.get_by_id(saved_candidate.id) is None

    def test_delete_twice_raises_not_found(self, store, saved_candidate):
        store.delete(saved_candidate.id)
        with pytest.raises(NotFoundError):
            store.delete(saved_candidate.id)


class TestOptimisticLocking:
    """Conditional writes compare the stored revision."""

    def test_matching_revision_succeeds(self, store, saved_candidate):
        updated = store.upsert(saved_candidate.evolve(city="Regina"), expected_revision=saved_candidate.revision)
        assert updated.revision == saved_candidate.revision + 1

    def test_stale_revision_conflicts(self, store, saved_candidate):
        store.upsert(saved_candidate.evolve(city="Regina"))

        with pytest.raises(ConflictError) as exc_info:
            store.upsert(saved_candidate.evolve(city="Calgary"), expected_revision=saved_candidate.revision)

        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 2
        assert store.get_by_id(saved_candidate.id).city == "Regina"

    def test_unconditional_write_is_last_write_wins(self, store, saved_candidate):
        store.upsert(saved_candidate.evolve(city="Regina"))
        store.upsert(saved_candidate.evolve(city="Calgary"))
        assert store.get_by_id(saved_candidate.id).city == "Calgary"
