"""
Unit tests for the symptom matching strategies and the matcher registry.
"""

import re
from unittest.mock import patch

import pytest

from symptomlens.processors.symptoms import (
    ContextAwareMatcher,
    ExtractionOptions,
    LegacySubstringMatcher,
    VocabularyEntry,
    available_versions,
    create_matcher,
    normalize_text,
)


def _match(text, vocabulary, **options):
    matcher = ContextAwareMatcher()
    return matcher.match(normalize_text(text), vocabulary, ExtractionOptions(**options))


def _by_phrase(records):
    return {r.phrase: r for r in records}


class TestContextAwareMatcher:
    """Test the v3.2 context-aware matcher"""

    def test_explicit_list_priority(self, vocabulary):
        records = _by_phrase(_match("Patient reports anxiety and fatigue.", vocabulary))

        assert set(records) == {"anxiety", "fatigue"}
        for record in records.values():
            assert record.match_type == "explicit_symptom_list"
            assert record.confidence == 0.98
            assert record.reporting_context == "patient_report"
            assert record.negated is False

    def test_negation_suppression(self, vocabulary):
        assert _match("Patient denies headache.", vocabulary) == []

    def test_reporting_override(self, vocabulary):
        records = _match(
            "Patient was asked about nausea but reports experiencing nausea currently",
            vocabulary,
        )
        assert len(records) == 1
        assert records[0].phrase == "nausea"
        assert records[0].negated is False

    def test_fallback_match_with_negation_override(self, vocabulary):
        cough = VocabularyEntry(id="R05", phrase="cough")
        records = _match("No fever noted. Endorsed cough at visit.", [cough])

        assert len(records) == 1
        assert records[0].match_type == "section_context_match"
        assert records[0].confidence == 0.92
        assert records[0].reporting_context is None
        assert records[0].section_type == "default"

    def test_section_exclusion(self, vocabulary):
        assert _match("Medications: ibuprofen for headache.", vocabulary) == []

    def test_structured_note(self, vocabulary, sample_structured_note_text):
        records = _by_phrase(_match(sample_structured_note_text, vocabulary))

        # insomnia only in medications, nausea only in plan
        assert set(records) == {"anxiety", "fatigue", "headache"}
        assert records["anxiety"].match_type == "explicit_symptom_list"
        assert records["fatigue"].section_type == "chief_complaint"
        assert records["headache"].section_type == "assessment"
        assert records["headache"].match_type == "section_context_match"

    def test_negated_section_does_not_block_later_section(self, vocabulary):
        records = _match("HPI: denies headache. Assessment: headache worsening.", vocabulary)

        assert len(records) == 1
        assert records[0].section_type == "assessment"

    def test_one_record_per_vocabulary_entry(self, vocabulary):
        text = "Headache today. Headache again. HPI: headache. Assessment: headache."
        records = _match(text, vocabulary)

        ids = [r.vocabulary_id for r in records]
        assert ids == ["R51.9"]

    def test_word_boundaries(self):
        ache = VocabularyEntry(id="R52", phrase="ache")

        assert _match("Patient has a headache", [ache]) == []
        records = _match("Patient has a headache", [ache], use_word_boundaries=False)
        assert [r.vocabulary_id for r in records] == ["R52"]

    def test_min_phrase_length(self):
        short = VocabularyEntry(id="X1", phrase="ab")

        assert _match("ab noted on exam", [short]) == []
        assert len(_match("ab noted on exam", [short], min_phrase_length=2)) == 1

    def test_negation_disabled(self, vocabulary):
        records = _match("Patient denies headache.", vocabulary, consider_negation=False)

        assert [r.phrase for r in records] == ["headache"]
        assert records[0].negated is False

    def test_bidirectional_list_containment(self):
        long_phrase = VocabularyEntry(id="R07.9", phrase="chest pain radiating to left arm")
        records = _match("Patient reports chest pain.", [long_phrase])

        assert len(records) == 1
        assert records[0].match_type == "explicit_symptom_list"

    def test_section_detection_disabled(self, vocabulary):
        records = _match("Medications: headache relief", vocabulary, detect_section_headers=False)

        assert [r.phrase for r in records] == ["headache"]
        assert records[0].section_type == "default"

    def test_pattern_failure_falls_back_to_substring(self):
        headache = VocabularyEntry(id="R51.9", phrase="headache")
        matcher = ContextAwareMatcher()
        text = normalize_text("Headaches noted overnight")

        assert matcher.match(text, [headache]) == []

        fresh = ContextAwareMatcher()
        with patch(
            "symptomlens.processors.symptoms.matchers.context_aware.re.compile",
            side_effect=re.error("bad pattern"),
        ):
            records = fresh.match(text, [headache])
        assert [r.vocabulary_id for r in records] == ["R51.9"]

    def test_prepare_precompiles_patterns(self, vocabulary):
        matcher = ContextAwareMatcher()
        matcher.prepare(vocabulary, ExtractionOptions())

        assert set(matcher._patterns) == {entry.phrase.lower() for entry in vocabulary}
        records = matcher.match(normalize_text("Patient denies headache. Fatigue noted."), vocabulary)
        # "denies" is within 50 characters of "fatigue" too
        assert records == []

    def test_empty_text(self, vocabulary):
        assert _match("", vocabulary) == []

    def test_record_carries_entry_metadata(self, vocabulary):
        record = _match("Patient reports insomnia.", vocabulary)[0]

        assert record.vocabulary_id == "F51.01"
        assert record.diagnosis == "Sleep Disorder"
        assert record.diagnostic_category == "Mental Health"
        # Derived from the id prefix when no code is given
        assert record.diagnosis_code == "F51"
        assert record.kind == "Symptom"


class TestLegacySubstringMatcher:
    """Test the v3.0 positional matcher"""

    @pytest.fixture
    def legacy_vocabulary(self):
        return [
            VocabularyEntry(id="R51.9", phrase="headache"),
            VocabularyEntry(id="R07.89", phrase="chest"),
            VocabularyEntry(id="R07.9", phrase="chest pain"),
        ]

    def test_every_occurrence_recorded(self, legacy_vocabulary):
        matcher = LegacySubstringMatcher()
        text = matcher.normalize("Headache in the morning, headache at night. Chest pain.")
        records = matcher.match(text, legacy_vocabulary)

        headache = [r.position for r in records if r.vocabulary_id == "R51.9"]
        assert headache == [0, 25]
        assert {r.match_type for r in records} == {"substring_occurrence"}

    def test_longer_phrases_first(self, legacy_vocabulary):
        matcher = LegacySubstringMatcher()
        records = matcher.match("chest pain", legacy_vocabulary)

        assert [r.phrase for r in records] == ["chest pain", "chest"]
        assert [r.position for r in records] == [0, 0]

    def test_same_phrase_position_recorded_once(self):
        duplicate = [
            VocabularyEntry(id="A", phrase="headache"),
            VocabularyEntry(id="B", phrase="headache"),
        ]
        records = LegacySubstringMatcher().match("headache", duplicate)
        assert [r.vocabulary_id for r in records] == ["A"]

    def test_no_negation_handling(self, legacy_vocabulary):
        records = LegacySubstringMatcher().match("patient denies headache", legacy_vocabulary)
        assert len(records) == 1

    def test_first_word_must_be_a_token(self, legacy_vocabulary):
        # "headaches" is not the token "headache"
        assert LegacySubstringMatcher().match("headaches daily", legacy_vocabulary) == []

    def test_prepare_reused_for_same_vocabulary(self, legacy_vocabulary):
        matcher = LegacySubstringMatcher()
        matcher.prepare(legacy_vocabulary)

        with patch.object(LegacySubstringMatcher, "_build_buckets") as build:
            matcher.match("headache", legacy_vocabulary)
        build.assert_not_called()

    def test_other_vocabulary_ignores_prepared_buckets(self, legacy_vocabulary):
        matcher = LegacySubstringMatcher()
        matcher.prepare(legacy_vocabulary)
        other = [VocabularyEntry(id="R11.0", phrase="nausea")]

        records = matcher.match("nausea and headache", other)
        assert [r.vocabulary_id for r in records] == ["R11.0"]

        matcher.prepare(other)
        prepared_vocabulary, buckets = matcher._prepared
        assert prepared_vocabulary is other
        assert list(buckets) == ["nausea"]

    def test_normalize_keeps_whitespace(self):
        assert LegacySubstringMatcher().normalize("Two  Spaces") == "two  spaces"


class TestMatcherRegistry:
    """Test version resolution"""

    def test_default_is_context_aware(self):
        matcher = create_matcher()
        assert isinstance(matcher, ContextAwareMatcher)
        assert matcher.version == "v3.2"
        assert matcher.extraction_method == "context_aware_matching"

    def test_legacy_version(self):
        matcher = create_matcher("v3.0")
        assert isinstance(matcher, LegacySubstringMatcher)
        assert matcher.version == "v3.0"

    def test_negation_window_from_config(self):
        matcher = create_matcher("v3.2", {"negation": {"window": 10}})
        assert matcher.negation_detector.window == 10

    def test_unknown_version(self):
        with pytest.raises(ValueError, match="Unknown matcher version"):
            create_matcher("v9.9")

    def test_available_versions(self):
        infos = available_versions()

        assert [info["version"] for info in infos] == ["v3.2", "v3.0"]
        for info in infos:
            assert {"version", "name", "description", "release_date", "features", "parameters"} <= set(info)
