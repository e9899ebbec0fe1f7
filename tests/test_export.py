"""
Tests for CSV export and the assessment transcript.
"""

import csv
import io

from hirefunnel.export import BASE_HEADERS, assessment_transcript, candidate_row, csv_headers, export_csv
from hirefunnel.models import AdminData, ExitQuestionnaire, IntakeQuestionnaire, PostInterview


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestHeaders:
    def test_column_set(self):
        headers = csv_headers()
        assert headers[:3] == ["ID", "Name", "Email"]
        assert "Q1_Competitiveness" in headers
        assert headers[-1] == "Q30"
        assert len(headers) == len(BASE_HEADERS) + 28


class TestCandidateRow:
    def test_blank_candidate(self, candidate_factory):
        row = dict(zip(csv_headers(), candidate_row(candidate_factory())))
        assert row["Name"] == "Pat Lee"
        assert row["PipelineStage"] == "Applied"
        assert row["Fit"] == "N/A"
        assert row["Interviewed"] == "No"
        assert row["CEO Invite"] == "N/A"
        assert row["Q3"] == ""
        assert row["Occupation"] == ""

    def test_assessed_candidate(self, candidate_factory, best_assessment):
        c = candidate_factory(
            assessment=best_assessment,
            score=104,
            fit_category="High Fit",
            post_interview=PostInterview(interview_completed=True, consent=True, ceo_invite="yes"),
        )
        row = dict(zip(csv_headers(), candidate_row(c)))
        assert row["Score"] == 104
        assert row["Fit"] == "High Fit"
        assert row["Interviewed"] == "Yes"
        assert row["CEO Invite"] == "yes"
        assert row["Q1_Competitiveness"] == 10
        assert row["Q3"] == "Strongly Agree"
        assert row["Q21"] == "Never True"

    def test_intake_fields(self, candidate_factory):
        q = IntakeQuestionnaire(
            occupation="Student",
            background_areas=["Sales", "Finance"],
            legally_entitled_canada="yes",
            resume_urls=["u1", "u2"],
        )
        row = dict(zip(csv_headers(), candidate_row(candidate_factory(applicant_questionnaire=q))))
        assert row["Occupation"] == "Student"
        assert row["BackgroundAreas"] == "Sales; Finance"
        assert row["LegallyEntitledCanada"] == "yes"
        assert row["ResumeUrls"] == "u1; u2"
        assert row["WhatStoodOut"] == ""

    def test_exit_fields_and_legacy_answers(self, candidate_factory):
        q = ExitQuestionnaire(
            what_stood_out="Mentorship",
            legally_entitled_canada_full_time="yes",
            extra={"occupation": "Student"},
        )
        row = dict(zip(csv_headers(), candidate_row(candidate_factory(applicant_questionnaire=q))))
        assert row["WhatStoodOut"] == "Mentorship"
        assert row["LegallyEntitledCanadaFullTime"] == "yes"
        assert row["LegallyEntitledCanada"] == "yes"
        assert row["Occupation"] == "Student"


class TestExportCsv:
    def test_one_row_per_candidate(self, candidate_factory):
        text = export_csv([candidate_factory("AAAAAAAA"), candidate_factory("BBBBBBBB")])
        rows = _rows(text)
        assert len(rows) == 3
        assert rows[1][0] == "AAAAAAAA"

    def test_minimal_quoting(self, candidate_factory):
        c = candidate_factory(admin_data=AdminData(next_step='Call, then "email"'))
        text = export_csv([c])
        assert '"Call, then ""email"""' in text
        assert "\nABC12345,Pat Lee," in text
        assert _rows(text)[1][csv_headers().index("NextStep")] == 'Call, then "email"'

    def test_writes_to_stream(self, candidate_factory):
        out = io.StringIO()
        text = export_csv([candidate_factory()], out)
        assert out.getvalue() == text


class TestTranscript:
    def test_no_assessment(self, candidate_factory):
        assert assessment_transcript(candidate_factory()) == ""

    def test_contents(self, candidate_factory, best_assessment):
        text = assessment_transcript(candidate_factory(assessment=best_assessment))
        assert "Q1. On a scale of 1–10, how competitive are you?" in text
        assert "Answer: 10/10" in text
        assert "Q3. I believe income should directly reflect performance.\nAnswer: Strongly Agree" in text
        assert "Answer: Never True" in text
        assert text.rstrip().endswith("and any concerns.")

    def test_without_prompt(self, candidate_factory, best_assessment):
        text = assessment_transcript(candidate_factory(assessment=best_assessment), include_prompt=False)
        assert "---" not in text
