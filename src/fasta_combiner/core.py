"""Orchestrator — fetches both documents, joins them and renders FASTA."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import requests

from fasta_combiner import __version__
from fasta_combiner.errors import (
    CombineError,
    InvalidParameterError,
    MissingParameterError,
    NoMatchError,
    ProcessingError,
)
from fasta_combiner.fasta import build_header, render_fasta
from fasta_combiner.fetcher import DEFAULT_TIMEOUT, JsonFetcher, unwrap_records
from fasta_combiner.models import (
    DEFAULT_FIELDS,
    POLICIES,
    POLICY_LENIENT,
    POLICY_PRESENCE,
    CombineOptions,
    CombineResult,
    FastaRecord,
    MetadataRecord,
    SequenceRecord,
)
from fasta_combiner.selection import build_index, select

logger = logging.getLogger(__name__)


def parse_fields(raw: Optional[str]) -> List[str]:
    """Split a comma-separated field list, dropping blanks."""
    if raw is None:
        return list(DEFAULT_FIELDS)
    fields = [f.strip() for f in raw.split(",")]
    fields = [f for f in fields if f]
    if not fields:
        raise MissingParameterError("At least one field must be specified")
    return fields


def parse_policy(raw: Optional[str]) -> str:
    if not raw:
        return POLICY_LENIENT
    policy = raw.strip().lower()
    if policy not in POLICIES:
        raise InvalidParameterError(
            f"Unknown policy {raw!r}; expected one of: {', '.join(POLICIES)}"
        )
    return policy


class FastaCombiner:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": f"fasta-combiner/{__version__}"})
        self._fetcher = JsonFetcher(session, timeout)

    def combine(
        self,
        sequences_url: Optional[str],
        metadata_url: Optional[str],
        options: Optional[CombineOptions] = None,
    ) -> CombineResult:
        """Join sequences with metadata and return the FASTA export.

        Raises MissingParameterError before any request is made when either
        URL is blank, FetchError when either download fails, NoMatchError when
        the presence policy leaves nothing to export, and ProcessingError for
        anything unexpected while joining.
        """
        options = options or CombineOptions()
        if not sequences_url or not metadata_url:
            raise MissingParameterError()
        if not options.fields:
            raise MissingParameterError("At least one field must be specified")

        sequences_doc, metadata_doc = self._fetch_both(sequences_url, metadata_url)
        raw_sequences = unwrap_records(sequences_doc, sequences_url)
        raw_metadata = unwrap_records(metadata_doc, metadata_url)

        try:
            result = self._join(raw_sequences, raw_metadata, options)
        except CombineError:
            raise
        except Exception as exc:
            logger.exception("Failed to combine %s with %s", sequences_url, metadata_url)
            raise ProcessingError(str(exc) or type(exc).__name__) from exc

        logger.info(
            "Combined %d of %d sequences (%s policy)",
            result.included, result.total, options.policy,
        )
        if not result.records and options.policy == POLICY_PRESENCE:
            raise NoMatchError()
        return result

    def _fetch_both(self, sequences_url: str, metadata_url: str):
        with ThreadPoolExecutor(max_workers=2) as pool:
            sequences_future = pool.submit(self._fetcher.fetch, sequences_url)
            metadata_future = pool.submit(self._fetcher.fetch, metadata_url)
            return sequences_future.result(), metadata_future.result()

    @staticmethod
    def _join(
        raw_sequences: list, raw_metadata: list, options: CombineOptions
    ) -> CombineResult:
        index = build_index(MetadataRecord.from_dict(raw) for raw in raw_metadata)
        records = []
        for raw in raw_sequences:
            seq = SequenceRecord.from_dict(raw)
            meta = index.get(seq.accession_version)
            if not select(seq, meta, options):
                continue
            header = build_header(meta, options.fields, seq.accession_version)
            records.append(FastaRecord(header, seq.sequence))
        return CombineResult(
            text=render_fasta(records),
            records=records,
            total=len(raw_sequences),
            included=len(records),
        )
