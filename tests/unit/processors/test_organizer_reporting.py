"""
Unit tests for match organization, reports and summary statistics.
"""

import pytest

from symptomlens.processors.symptoms import (
    UNKNOWN_KEY,
    ExtractionResult,
    MatchRecord,
    NoteFailure,
    OrganizedIndex,
    SymptomExtractor,
    generate_extraction_report,
    organize_matches,
    summary_statistics,
)


def _record(phrase, diagnosis=None, category=None, code=None, confidence=0.92, **kwargs):
    return MatchRecord(
        vocabulary_id=kwargs.pop("vocabulary_id", phrase),
        phrase=phrase,
        match_type=kwargs.pop("match_type", "section_context_match"),
        section_type=kwargs.pop("section_type", "default"),
        confidence=confidence,
        diagnosis=diagnosis,
        diagnostic_category=category,
        diagnosis_code=code,
        **kwargs,
    )


class TestOrganizeMatches:
    """Test the four-way organized index"""

    def test_groups_by_each_dimension(self):
        matches = [
            _record("insomnia", "Sleep Disorder", "Mental Health", "F51"),
            _record("anxiety", "Anxiety", "Mental Health", "F41"),
            _record("insomnia", "Sleep Disorder", "Mental Health", "F51"),
        ]
        index = organize_matches(matches)

        assert list(index.by_symptom_segment) == ["insomnia", "anxiety"]
        assert len(index.by_symptom_segment["insomnia"]) == 2
        assert len(index.by_category["Mental Health"]) == 3
        assert set(index.by_diagnosis_code) == {"F51", "F41"}

    def test_missing_values_use_unknown_bucket(self):
        index = organize_matches([_record("cough")])

        assert list(index.by_diagnosis) == [UNKNOWN_KEY]
        assert list(index.by_category) == [UNKNOWN_KEY]
        assert list(index.by_diagnosis_code) == [UNKNOWN_KEY]

    def test_records_are_shared_not_copied(self):
        record = _record("cough", "Cough", "Respiratory", "R05")
        index = organize_matches([record])

        for buckets in index.dimensions().values():
            (records,) = buckets.values()
            assert records[0] is record

    def test_empty(self):
        assert organize_matches([]).summary() == {
            "by_symptom_segment": 0,
            "by_diagnosis": 0,
            "by_category": 0,
            "by_diagnosis_code": 0,
        }

    def test_merge_appends_buckets(self):
        first = organize_matches([_record("cough", "Cough", "Respiratory", "R05")])
        second = organize_matches(
            [_record("cough", "Cough", "Respiratory", "R05"), _record("fever", "Fever", "General", "R50")]
        )
        first.merge(second)

        assert len(first.by_symptom_segment["cough"]) == 2
        assert set(first.by_category) == {"Respiratory", "General"}

    def test_merge_into_empty_index(self):
        index = OrganizedIndex()
        index.merge(organize_matches([_record("cough")]))
        assert index.summary()["by_symptom_segment"] == 1


class TestExtractionReport:
    """Test the markdown report"""

    @pytest.fixture
    def debug_result(self, sample_notes, vocabulary):
        return SymptomExtractor().extract(sample_notes, vocabulary, {"debug": True})

    def test_header_and_total(self, debug_result):
        report = generate_extraction_report(debug_result)

        assert report.startswith("# Symptom Extraction Report (v3.2)")
        assert "Total symptoms extracted: 4" in report

    def test_group_sections(self, debug_result):
        report = generate_extraction_report(debug_result)

        assert "## Symptoms by Segment" in report
        assert "## Symptoms by Diagnosis" in report
        assert "## Symptoms by Diagnostic Category" in report
        assert '- "insomnia" (1 matches)' in report
        assert "  - Match types: explicit_symptom_list" in report
        assert "  - Confidence: 0.98" in report
        assert "- Mental Health: 2 matches" in report
        assert "  - Diagnoses: Sleep Disorder, Generalized Anxiety Disorder" in report

    def test_without_index(self, sample_notes, vocabulary):
        result = SymptomExtractor().extract(sample_notes, vocabulary)
        report = generate_extraction_report(result)

        assert "Total symptoms extracted: 4" in report
        assert "## Symptoms by Segment" not in report

    def test_preview_truncates_long_lists(self):
        matches = [
            _record(phrase, "Shared Diagnosis", "General", "R00")
            for phrase in ("cough", "fever", "chills", "malaise", "sweats")
        ]
        result = ExtractionResult(
            matches=matches,
            organized_index=organize_matches(matches),
            version="v3.2",
            total_extracted=len(matches),
        )
        report = generate_extraction_report(result)

        assert "  - Symptoms: cough, fever, chills and 2 more" in report

    def test_mean_confidence_formatting(self):
        matches = [
            _record("cough", confidence=0.98, match_type="explicit_symptom_list"),
            _record("cough", confidence=0.92),
        ]
        result = ExtractionResult(
            matches=matches, organized_index=organize_matches(matches), version="v3.2", total_extracted=2
        )
        report = generate_extraction_report(result)

        assert "  - Match types: explicit_symptom_list, section_context_match" in report
        assert "  - Confidence: 0.95" in report

    def test_failures_reported(self):
        result = ExtractionResult(
            version="v3.2", failures=[NoteFailure(patient_id="P1", note_id="N1", error="boom")]
        )
        assert "Notes failed: 1" in generate_extraction_report(result)


class TestSummaryStatistics:
    """Test summary statistics"""

    def test_batch_statistics(self, sample_notes, vocabulary):
        result = SymptomExtractor().extract(sample_notes, vocabulary)
        stats = summary_statistics(result)

        assert stats["total_extracted"] == 4
        assert stats["patients"] == 2
        assert stats["notes_with_matches"] == 2
        assert stats["match_types"] == {"explicit_symptom_list": 4}
        assert stats["confidence"]["mean"] == pytest.approx(0.98)
        assert stats["confidence"]["min"] == stats["confidence"]["max"]

    def test_empty_result(self):
        stats = summary_statistics(ExtractionResult(version="v3.2"))

        assert stats["total_extracted"] == 0
        assert stats["confidence"] is None
        assert stats["match_types"] == {}

    def test_extractor_delegates(self, sample_notes, vocabulary):
        extractor = SymptomExtractor()
        result = extractor.extract(sample_notes, vocabulary)

        assert extractor.get_summary_statistics(result) == summary_statistics(result)
        assert extractor.generate_report(result) == generate_extraction_report(result)
