"""
Pytest fixtures for kgview tests.
"""

import pytest
from pathlib import Path

PREFIXES = """
@prefix : <http://example.org/clinic#> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .
"""

PATIENT_DOCTOR = PREFIXES + """
:Patient a owl:Class .
:Doctor a owl:Class .
:treatedBy a owl:ObjectProperty ;
    rdfs:domain :Patient ;
    rdfs:range :Doctor .
"""

NAME_ATTRIBUTE = """
:name a owl:DatatypeProperty ;
    rdfs:domain :Patient ;
    rdfs:range xsd:string .
"""

DANGLING_ATTRIBUTE = """
:dosage a owl:DatatypeProperty ;
    rdfs:domain :Prescription ;
    rdfs:range xsd:decimal .
"""


def get_test_data_path(relative_path: str) -> Path:
    """Get path to test data file."""
    path = Path(__file__).parent / "test_data" / relative_path
    if not path.exists():
        raise FileNotFoundError(f"Test data path {path} does not exist")
    return path


@pytest.fixture
def test_data_dir():
    """Fixture for test data directory."""
    return Path(__file__).parent / "test_data"


@pytest.fixture
def patient_doctor_ttl():
    return PATIENT_DOCTOR


@pytest.fixture
def patient_doctor_name_ttl():
    return PATIENT_DOCTOR + NAME_ATTRIBUTE


@pytest.fixture
def dangling_attribute_ttl():
    return PATIENT_DOCTOR + DANGLING_ATTRIBUTE


@pytest.fixture
def medical_ttl():
    return get_test_data_path("medical.ttl").read_text(encoding="utf-8")


@pytest.fixture
def malformed_ttl():
    return get_test_data_path("malformed.ttl").read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("kgview.config.HOME_CONFIG_DIR", tmp_path / "home")
    for var in ("KGVIEW_CONFIG", "KGVIEW_MODE", "KGVIEW_FALLBACK", "KGVIEW_ID_STRATEGY",
                "KGVIEW_LOG_LEVEL", "KGVIEW_LAYOUT"):
        monkeypatch.delenv(var, raising=False)
