"""Request-scoped records: the contract between fetcher, selector and formatter."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

ACCESSION_KEY = "accessionVersion"
SEQUENCE_KEY = "main"  # upstream name of the unaligned nucleotide sequence
DATE_FIELD = "sampleCollectionDate"

DEFAULT_FIELDS = ["displayName", "sampleCollectionDate"]

POLICY_LENIENT = "lenient"
POLICY_PRESENCE = "presence"
POLICIES = [POLICY_LENIENT, POLICY_PRESENCE]


def _require_accession(raw: Mapping[str, Any]) -> str:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected a JSON object, got {type(raw).__name__}")
    accession = raw.get(ACCESSION_KEY)
    if accession is None or accession == "":
        raise ValueError(f"Record is missing {ACCESSION_KEY}")
    return str(accession)


def _render_value(value: Any) -> str:
    """Render a JSON value the way the dashboards show it: true, 1, 1.5."""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value)


@dataclass(frozen=True)
class SequenceRecord:
    accession_version: str
    sequence: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SequenceRecord":
        accession = _require_accession(raw)
        sequence = raw.get(SEQUENCE_KEY)
        return cls(accession, "" if sequence is None else sequence)


@dataclass(frozen=True)
class MetadataRecord:
    accession_version: str
    fields: Mapping[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MetadataRecord":
        """Build from an upstream object; nulls stay absent, other values become JSON text."""
        accession = _require_accession(raw)
        fields: Dict[str, Optional[str]] = {}
        for key, value in raw.items():
            if key == ACCESSION_KEY:
                continue
            fields[key] = None if value is None else _render_value(value)
        return cls(accession, fields)

    def get(self, name: str) -> Optional[str]:
        return self.fields.get(name)


@dataclass(frozen=True)
class FastaRecord:
    header: str
    sequence: str

    def to_fasta(self) -> str:
        return f">{self.header}\n{self.sequence}\n"


@dataclass
class CombineOptions:
    fields: List[str] = field(default_factory=lambda: list(DEFAULT_FIELDS))
    filter_field: Optional[str] = None
    policy: str = POLICY_LENIENT


@dataclass
class CombineResult:
    text: str
    records: List[FastaRecord] = field(default_factory=list)
    total: int = 0
    included: int = 0

    @property
    def skipped(self) -> int:
        return self.total - self.included
