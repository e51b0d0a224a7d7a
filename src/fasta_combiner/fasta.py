"""Render joined records as two-line FASTA text."""

from typing import Iterable, List, Optional

from fasta_combiner.models import FastaRecord, MetadataRecord


def build_header(
    metadata: Optional[MetadataRecord], fields: List[str], accession_version: str
) -> str:
    """Join the requested field values with ``|``, falling back to the accession.

    The accession is used when there is no metadata at all, or when every
    requested field is missing or empty (so no header is ever just ``||``).
    """
    if metadata is None:
        return accession_version
    values = [metadata.get(name) or "" for name in fields]
    if all(v == "" for v in values):
        return accession_version
    return "|".join(values)


def render_fasta(records: Iterable[FastaRecord]) -> str:
    return "".join(rec.to_fasta() for rec in records)


def write_fasta(text: str, filepath: str) -> None:
    with open(filepath, "w", newline="", encoding="utf-8") as fh:
        fh.write(text)


def fasta_to_bytes(text: str) -> bytes:
    """Encode FASTA text (for Streamlit download button)."""
    return text.encode("utf-8")
