"""Shared fixtures for fasta-combiner tests."""

import pytest
import requests

SEQUENCES_URL = "https://lapis.example.org/sample/unalignedNucleotideSequences"
METADATA_URL = "https://lapis.example.org/sample/details"


@pytest.fixture
def session():
    return requests.Session()


# --- Mock upstream payloads ---

@pytest.fixture
def sequences_payload():
    return {
        "data": [
            {"accessionVersion": "A.1", "main": "ACGT"},
            {"accessionVersion": "B.1", "main": "acgtNNNN"},
            {"accessionVersion": "C.1", "main": "TTGACA"},
        ]
    }


@pytest.fixture
def metadata_payload():
    return {
        "data": [
            {
                "accessionVersion": "A.1",
                "displayName": "Sample A",
                "sampleCollectionDate": "2023-05-01",
            },
            {
                "accessionVersion": "B.1",
                "displayName": "Sample B",
                "sampleCollectionDate": "2023-02-30",
            },
            {
                "accessionVersion": "C.1",
                "displayName": None,
                "sampleCollectionDate": None,
            },
        ]
    }


@pytest.fixture
def mock_upstream(sequences_payload, metadata_payload):
    """Register both upstream documents with an active ``responses`` mock."""
    import responses

    def _register(sequences=None, metadata=None):
        responses.add(
            responses.GET, SEQUENCES_URL,
            json=sequences_payload if sequences is None else sequences, status=200,
        )
        responses.add(
            responses.GET, METADATA_URL,
            json=metadata_payload if metadata is None else metadata, status=200,
        )

    return _register
