"""
Tests for record resolution and merge-on-write.
"""

import re

import pytest

from hirefunnel.errors import NotFoundError
from hirefunnel.models import ExitQuestionnaire, IntakeQuestionnaire
from hirefunnel.resolver import (
    RecordResolver,
    find_duplicates,
    generate_candidate_id,
    merge_on_write,
    merge_questionnaire,
    merge_urls,
)


class TestCandidateId:
    def test_format(self):
        assert re.fullmatch(r"[0-9A-F]{8}", generate_candidate_id())


class TestRecordResolver:
    """Lookup and create-vs-update."""

    @pytest.fixture
    def resolver(self, store):
        return RecordResolver(store)

    def test_lookup_is_case_insensitive(self, resolver, saved_candidate):
        found = resolver.lookup("  PAT@Example.com ")
        assert found.id == saved_candidate.id

    def test_lookup_miss_raises(self, resolver):
        with pytest.raises(NotFoundError) as exc_info:
            resolver.lookup("nobody@example.com")
        assert str(exc_info.value) == "No record found for this email."

    def test_find_miss_returns_none(self, resolver):
        assert resolver.find("nobody@example.com") is None

    def test_get_uppercases_id(self, resolver, saved_candidate):
        assert resolver.get(saved_candidate.id.lower()).id == saved_candidate.id

    def test_get_unknown_raises(self, resolver):
        with pytest.raises(NotFoundError):
            resolver.get("FFFFFFFF")

    def test_resolve_creates_then_reuses(self, resolver):
        first, created = resolver.resolve("New.Person@Example.com", first_name="New", last_name="Person")
        assert created is True
        assert first.email == "new.person@example.com"

        second, created = resolver.resolve("new.person@example.com")
        assert created is False
        assert second.id == first.id

    def test_build_normalizes_identity(self, resolver):
        c = resolver.build(first_name=" Lee ", email=" LEE@X.CA ", phone="(905) 555-1234")
        assert c.first_name == "Lee"
        assert c.email == "lee@x.ca"
        assert c.phone == "9055551234"
        assert c.revision == 0


class TestMergeOnWrite:
    """Resubmissions never lose stored data."""

    def test_blank_fields_do_not_overwrite(self, candidate_factory):
        existing = candidate_factory(city="Ottawa")
        merged = merge_on_write(existing, first_name="Patricia", city="  ")
        assert merged.first_name == "Patricia"
        assert merged.city == "Ottawa"
        assert merged.last_name == "Lee"

    def test_resume_urls_concatenate(self):
        old = IntakeQuestionnaire(occupation="Student", resume_urls=["a.pdf"])
        new = IntakeQuestionnaire(occupation="", resume_urls=["b.pdf", "a.pdf"])
        merged = merge_questionnaire(old, new)
        assert merged.resume_urls == ["a.pdf", "b.pdf"]
        assert merged.occupation == "Student"

    def test_merge_urls_keeps_order(self):
        assert merge_urls(["x", "y"], ["z", "x"]) == ["x", "y", "z"]

    def test_different_variant_keeps_legacy_answers(self):
        old = IntakeQuestionnaire(occupation="Student", legally_entitled_canada="yes", resume_urls=["a.pdf"])
        new = ExitQuestionnaire(what_stood_out="Mentorship")
        merged = merge_questionnaire(old, new)
        assert isinstance(merged, ExitQuestionnaire)
        assert merged.what_stood_out == "Mentorship"
        assert merged.extra["occupation"] == "Student"
        assert merged.resume_urls == ["a.pdf"]

    def test_missing_incoming_keeps_existing(self):
        old = IntakeQuestionnaire(occupation="Student")
        assert merge_questionnaire(old, None) is old


class TestFindDuplicates:
    def test_reports_shared_emails_only(self, candidate_factory):
        a = candidate_factory("AAAAAAAA", email="dup@example.com", timestamp="2025-01-01T00:00:00.000Z")
        b = candidate_factory("BBBBBBBB", email="DUP@example.com", timestamp="2025-01-02T00:00:00.000Z")
        c = candidate_factory("CCCCCCCC", email="solo@example.com")
        assert find_duplicates([a, b, c]) == {"dup@example.com": ["BBBBBBBB", "AAAAAAAA"]}
