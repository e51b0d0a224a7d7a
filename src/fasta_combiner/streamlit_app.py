"""Streamlit web UI for fasta-combiner."""

import os
import sys
from pathlib import Path

# Ensure the src/ directory is on the Python path so that
# fasta_combiner is importable on Streamlit Community Cloud
# (which doesn't pip-install the package itself).
_src_dir = str(Path(__file__).resolve().parent.parent)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

import pandas as pd
import streamlit as st

from fasta_combiner.core import FastaCombiner, parse_fields
from fasta_combiner.errors import CombineError
from fasta_combiner.fasta import fasta_to_bytes
from fasta_combiner.fetcher import DEFAULT_TIMEOUT
from fasta_combiner.models import DEFAULT_FIELDS, POLICIES, CombineOptions


def main():
    st.set_page_config(page_title="FASTA Combiner", layout="wide")
    st.title("Sequence + Metadata FASTA Combiner")
    st.markdown(
        "Join a **sequences** JSON export with a **metadata** JSON export by "
        "`accessionVersion` and download the result as FASTA."
    )

    # Sidebar
    with st.sidebar:
        st.header("Settings")
        policy = st.selectbox(
            "Inclusion policy",
            POLICIES,
            help="lenient: keep every sequence; presence: require all header fields",
        )
        filter_field = st.text_input(
            "Date filter field (lenient only)",
            value="",
            help="Drop records whose value for this field is not a valid YYYY-MM-DD date",
        )
        timeout = st.number_input(
            "Request timeout (s)",
            min_value=1.0,
            value=float(os.environ.get("FASTA_COMBINER_TIMEOUT", DEFAULT_TIMEOUT)),
        )

    # Input
    sequences_url = st.text_input("Sequences URL")
    metadata_url = st.text_input("Metadata URL")
    fields_text = st.text_input("Header fields (comma-separated)", value=",".join(DEFAULT_FIELDS))

    ready = bool(sequences_url.strip() and metadata_url.strip())
    if st.button("Combine", type="primary", disabled=not ready):
        with st.spinner("Fetching and combining..."):
            try:
                options = CombineOptions(
                    fields=parse_fields(fields_text),
                    filter_field=filter_field.strip() or None,
                    policy=policy,
                )
                result = FastaCombiner(timeout=timeout).combine(
                    sequences_url.strip(), metadata_url.strip(), options
                )
            except CombineError as exc:
                st.session_state.pop("result", None)
                st.error(str(exc))
            else:
                st.session_state["result"] = result

    # Display results
    if "result" in st.session_state:
        result = st.session_state["result"]

        # Metrics
        col1, col2, col3 = st.columns(3)
        col1.metric("Sequences", result.total)
        col2.metric("Included", result.included)
        col3.metric("Skipped", result.skipped)

        # Table
        df = pd.DataFrame(
            [{"header": r.header, "length": len(r.sequence)} for r in result.records],
            columns=["header", "length"],
        )
        st.dataframe(df, use_container_width=True)

        # Download
        st.download_button(
            label="Download FASTA",
            data=fasta_to_bytes(result.text),
            file_name="combined.fasta",
            mime="text/plain",
        )


if __name__ == "__main__":
    main()
