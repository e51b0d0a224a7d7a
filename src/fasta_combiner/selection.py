"""Index metadata by accession and decide which sequences are exported."""

import datetime
import logging
import re
from typing import Dict, Iterable, Optional

from fasta_combiner.models import (
    DATE_FIELD,
    POLICY_PRESENCE,
    CombineOptions,
    MetadataRecord,
    SequenceRecord,
)

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def build_index(records: Iterable[MetadataRecord]) -> Dict[str, MetadataRecord]:
    """Map accessionVersion -> record. Later duplicates overwrite earlier ones."""
    return {rec.accession_version: rec for rec in records}


def is_valid_date(value: Optional[str]) -> bool:
    """True for a YYYY-MM-DD string naming a real calendar date."""
    if not value or not _DATE_RE.fullmatch(value):
        return False
    year, month, day = (int(part) for part in value.split("-"))
    try:
        datetime.date(year, month, day)
    except ValueError:
        return False
    return True


def select(
    sequence: SequenceRecord,
    metadata: Optional[MetadataRecord],
    options: CombineOptions,
) -> bool:
    if options.policy == POLICY_PRESENCE:
        return _has_required_fields(sequence, metadata, options)
    return _passes_date_filter(sequence, metadata, options.filter_field)


def _has_required_fields(
    sequence: SequenceRecord,
    metadata: Optional[MetadataRecord],
    options: CombineOptions,
) -> bool:
    if metadata is None:
        logger.debug("Skipping %s: no metadata", sequence.accession_version)
        return False
    for name in options.fields:
        value = metadata.get(name)
        if not value:
            logger.debug("Skipping %s: %s is empty", sequence.accession_version, name)
            return False
        if name == DATE_FIELD and not is_valid_date(value):
            logger.debug("Skipping %s: invalid %s %r", sequence.accession_version, name, value)
            return False
    return True


def _passes_date_filter(
    sequence: SequenceRecord,
    metadata: Optional[MetadataRecord],
    filter_field: Optional[str],
) -> bool:
    # Only a present, malformed value excludes a record here.
    if not filter_field or metadata is None:
        return True
    value = metadata.get(filter_field)
    if value and not is_valid_date(value):
        logger.debug("Skipping %s: invalid %s %r", sequence.accession_version, filter_field, value)
        return False
    return True
