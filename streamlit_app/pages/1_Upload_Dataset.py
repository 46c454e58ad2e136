import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import streamlit as st

from api.errors import CSVParseError, InvalidFileError
from pipeline.csv_reader import decode_csv, read_csv_text, validate_csv_file
from pipeline.label_resolver import find_label_column
from streamlit_app.state import init_state, select_file

init_state()

st.title("📂 Upload Dataset")

st.markdown("""
Upload **blockchain node data** (CSV) for attack detection analysis.
""")

uploaded_file = st.file_uploader(
    "Choose a CSV file",
    type=["csv"]
)

if uploaded_file is not None:
    try:
        validate_csv_file(uploaded_file.name, uploaded_file.type)
    except InvalidFileError as e:
        st.error(f"❌ {e}")
        st.stop()

    content = uploaded_file.getvalue()

    if (uploaded_file.name, content) != (st.session_state["uploaded_name"], st.session_state["uploaded_bytes"]):
        select_file(uploaded_file.name, content, uploaded_file.type)

    st.success(f"File selected: {uploaded_file.name} ({len(content) / 1024:.1f} KB)")

    try:
        df = read_csv_text(decode_csv(content))
    except CSVParseError as e:
        st.error(f"❌ Failed to read CSV: {e}")
        st.stop()

    st.subheader("Preview")
    st.dataframe(df.head(50), use_container_width=True)

    st.subheader("Dataset Summary")
    st.write("Columns:", len(df.columns))
    st.write("Rows:", len(df))

    label_col = find_label_column(df.columns)
    if label_col is not None:
        st.warning(f"⚠️ Label column detected: '{label_col}' (ground truth available)")
    else:
        st.info("ℹ️ No label column (pure inference mode)")
