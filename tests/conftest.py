"""
Shared pytest fixtures and configuration for SymptomLens tests

This module provides common fixtures and test data that can be used
across all test modules.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add SymptomLens to path
symptomlens_path = Path(__file__).parent.parent
sys.path.insert(0, str(symptomlens_path))

from symptomlens.processors.symptoms import ClinicalNote, VocabularyEntry  # noqa: E402


# ============================================================================
# Vocabulary Fixtures
# ============================================================================


@pytest.fixture
def vocabulary():
    """Small reference vocabulary covering symptoms and one HRSN problem"""
    return [
        VocabularyEntry(
            id="F51.01",
            phrase="insomnia",
            diagnosis="Sleep Disorder",
            diagnostic_category="Mental Health",
        ),
        VocabularyEntry(
            id="F41.1",
            phrase="anxiety",
            diagnosis="Generalized Anxiety Disorder",
            diagnostic_category="Mental Health",
            diagnosis_code="F41.1",
        ),
        VocabularyEntry(
            id="R53.83",
            phrase="fatigue",
            diagnosis="Other Fatigue",
            diagnostic_category="General Symptoms",
        ),
        VocabularyEntry(
            id="R51.9",
            phrase="headache",
            diagnosis="Headache, Unspecified",
            diagnostic_category="Neurological",
        ),
        VocabularyEntry(
            id="R11.0",
            phrase="nausea",
            diagnosis="Nausea",
            diagnostic_category="Gastrointestinal",
        ),
        VocabularyEntry(
            id="Z59.0",
            phrase="homelessness",
            diagnosis="Homelessness",
            diagnostic_category="Social Determinants",
            kind="Problem",
            hrsn_mapping="housing_status",
        ),
    ]


@pytest.fixture
def vocabulary_rows():
    """Vocabulary as rows from the symptom segment master sheet"""
    return [
        {
            "symptom_id": "F51.01",
            "symptom_segment": "insomnia",
            "diagnosis": "Sleep Disorder",
            "diagnostic_category": "Mental Health",
            "symp_prob": "Symptom",
        },
        {
            "symptom_id": "R53.83",
            "symptom_segment": "fatigue",
            "diagnosis": "Other Fatigue",
            "diagnostic_category": "General Symptoms",
            "symp_prob": "Symptom",
        },
    ]


# ============================================================================
# Note Fixtures
# ============================================================================


@pytest.fixture
def sample_structured_note_text():
    """Note with section headers, including sections excluded from matching"""
    return (
        "Chief Complaint: fatigue for two weeks.\n"
        "HPI: Patient reports anxiety and poor sleep.\n"
        "Medications: melatonin for insomnia.\n"
        "Assessment: headache, likely tension type.\n"
        "Plan: follow up for nausea if it develops."
    )


@pytest.fixture
def sample_notes():
    """Batch of notes for two patients"""
    return [
        ClinicalNote(
            patient_id="P001",
            note_id="N001",
            text="Patient reports trouble sleeping and insomnia for several weeks.",
            service_date=date(2025, 5, 1),
        ),
        ClinicalNote(
            patient_id="P001",
            note_id="N002",
            text="Patient denies headache. Fatigue is improving.",
            service_date=date(2025, 5, 15),
        ),
        ClinicalNote(
            patient_id="P002",
            note_id="N003",
            text="Symptoms include nausea, fatigue and anxiety.",
            service_date=date(2025, 5, 2),
        ),
    ]


@pytest.fixture
def sample_note_rows():
    """Notes as rows from the notes feed"""
    return [
        {
            "patient_id": "P001",
            "note_id": "N001",
            "note_text": "Patient reports insomnia.",
            "dos_date": "2025-05-01",
        },
        {
            "patient_id": "P002",
            "note_id": "N002",
            "note_text": None,
            "dos_date": "2025-05-02",
        },
        {
            "patient_id": "P003",
            "note_id": "N003",
            "note_text": "Client complains of fatigue.",
            "dos_date": "2025-05-03",
        },
    ]


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def extraction_config():
    """Extraction configuration with debug output enabled"""
    return {
        "version": "v3.2",
        "options": {"debug": True},
        "persistence": {"batch_size": 2},
    }


@pytest.fixture
def symptomlens_config(extraction_config):
    """Top-level SymptomLens configuration"""
    return {"extraction": extraction_config}
