"""Join sequence and metadata JSON exports into FASTA."""

__version__ = "0.1.0"
