import pytest
import responses

from fasta_combiner.core import FastaCombiner, parse_fields, parse_policy
from fasta_combiner.errors import (
    FetchError,
    InvalidParameterError,
    MissingParameterError,
    NoMatchError,
    ProcessingError,
)
from fasta_combiner.models import POLICY_LENIENT, POLICY_PRESENCE, CombineOptions

from conftest import METADATA_URL, SEQUENCES_URL

ONE_SEQUENCE = {"data": [{"accessionVersion": "A.1", "main": "ACGT"}]}
ONE_METADATA = {
    "data": [
        {"accessionVersion": "A.1", "displayName": "Sample A", "sampleCollectionDate": "2023-05-01"}
    ]
}


def test_parse_fields():
    assert parse_fields("displayName, country ,,") == ["displayName", "country"]
    assert parse_fields(None) == ["displayName", "sampleCollectionDate"]


def test_parse_fields_empty_raises():
    with pytest.raises(MissingParameterError):
        parse_fields(" , ")


def test_parse_policy():
    assert parse_policy(None) == POLICY_LENIENT
    assert parse_policy("Presence") == POLICY_PRESENCE
    with pytest.raises(InvalidParameterError):
        parse_policy("strict")


@responses.activate
def test_presence_example(session, mock_upstream):
    mock_upstream(sequences=ONE_SEQUENCE, metadata=ONE_METADATA)

    result = FastaCombiner(session).combine(
        SEQUENCES_URL, METADATA_URL, CombineOptions(policy=POLICY_PRESENCE)
    )
    assert result.text == ">Sample A|2023-05-01\nACGT\n"


@responses.activate
def test_lenient_without_metadata_uses_accession(session, mock_upstream):
    mock_upstream(sequences=ONE_SEQUENCE, metadata={"data": []})

    result = FastaCombiner(session).combine(SEQUENCES_URL, METADATA_URL)
    assert result.text == ">A.1\nACGT\n"


@responses.activate
def test_presence_without_metadata_is_no_match(session, mock_upstream):
    mock_upstream(sequences=ONE_SEQUENCE, metadata={"data": []})

    with pytest.raises(NoMatchError):
        FastaCombiner(session).combine(
            SEQUENCES_URL, METADATA_URL, CombineOptions(policy=POLICY_PRESENCE)
        )


@responses.activate
def test_lenient_includes_all_in_order(session, mock_upstream):
    mock_upstream()

    result = FastaCombiner(session).combine(SEQUENCES_URL, METADATA_URL)
    assert result.text == (
        ">Sample A|2023-05-01\nACGT\n"
        ">Sample B|2023-02-30\nacgtNNNN\n"
        ">C.1\nTTGACA\n"
    )
    assert result.total == 3
    assert result.included == 3
    assert result.skipped == 0


@responses.activate
def test_lenient_date_filter_skips_malformed(session, mock_upstream):
    mock_upstream()

    result = FastaCombiner(session).combine(
        SEQUENCES_URL, METADATA_URL, CombineOptions(filter_field="sampleCollectionDate")
    )
    assert [r.header for r in result.records] == ["Sample A|2023-05-01", "C.1"]
    assert result.skipped == 1


@responses.activate
def test_presence_keeps_only_complete_valid_records(session, mock_upstream):
    mock_upstream()

    result = FastaCombiner(session).combine(
        SEQUENCES_URL, METADATA_URL, CombineOptions(policy=POLICY_PRESENCE)
    )
    assert result.text == ">Sample A|2023-05-01\nACGT\n"


@responses.activate
def test_presence_round_trip_keeps_all_records_in_order(session, mock_upstream):
    accessions = ["Z.1", "M.2", "A.3", "Q.1"]
    sequences = {"data": [{"accessionVersion": a, "main": "ACGT" * (i + 1)} for i, a in enumerate(accessions)]}
    metadata = {
        "data": [
            {"accessionVersion": a, "displayName": f"name-{a}", "sampleCollectionDate": "2021-07-15"}
            for a in reversed(accessions)
        ]
    }
    mock_upstream(sequences=sequences, metadata=metadata)

    result = FastaCombiner(session).combine(
        SEQUENCES_URL, METADATA_URL, CombineOptions(policy=POLICY_PRESENCE)
    )
    assert result.included == len(accessions)
    assert [r.header for r in result.records] == [f"name-{a}|2021-07-15" for a in accessions]
    assert [r.sequence for r in result.records] == [s["main"] for s in sequences["data"]]


@responses.activate
def test_duplicate_metadata_last_wins(session, mock_upstream):
    metadata = {
        "data": [
            {"accessionVersion": "A.1", "displayName": "old"},
            {"accessionVersion": "A.1", "displayName": "new"},
        ]
    }
    mock_upstream(sequences=ONE_SEQUENCE, metadata=metadata)

    result = FastaCombiner(session).combine(
        SEQUENCES_URL, METADATA_URL, CombineOptions(fields=["displayName"])
    )
    assert result.text == ">new\nACGT\n"


@pytest.mark.parametrize("sequences_url, metadata_url", [
    (None, METADATA_URL),
    (SEQUENCES_URL, ""),
    (None, None),
])
@responses.activate
def test_missing_urls_make_no_requests(session, sequences_url, metadata_url):
    with pytest.raises(MissingParameterError):
        FastaCombiner(session).combine(sequences_url, metadata_url)
    assert len(responses.calls) == 0


@responses.activate
def test_fetch_failure_aborts(session):
    responses.add(responses.GET, SEQUENCES_URL, json=ONE_SEQUENCE, status=200)
    responses.add(responses.GET, METADATA_URL, status=404)

    with pytest.raises(FetchError):
        FastaCombiner(session).combine(SEQUENCES_URL, METADATA_URL)


@responses.activate
def test_bare_array_document_is_rejected(session, mock_upstream):
    mock_upstream(sequences=ONE_SEQUENCE["data"], metadata=ONE_METADATA)

    with pytest.raises(FetchError):
        FastaCombiner(session).combine(SEQUENCES_URL, METADATA_URL)


@responses.activate
def test_record_without_accession_is_processing_error(session, mock_upstream):
    mock_upstream(sequences={"data": [{"main": "ACGT"}]}, metadata=ONE_METADATA)

    with pytest.raises(ProcessingError) as excinfo:
        FastaCombiner(session).combine(SEQUENCES_URL, METADATA_URL)
    assert "accessionVersion" in excinfo.value.detail
