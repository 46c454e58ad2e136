import sys
import logging
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import streamlit as st

from streamlit_app.state import init_state

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

st.set_page_config(
    page_title="EpochGuard",
    layout="wide"
)

init_state()

with st.sidebar:
    st.header("Navigation")
    st.write("Use pages to navigate")

st.title("🛡️ EpochGuard")

st.markdown("""
A **hybrid ML model** (Decision Tree + Random Forest) for detecting
**long-range attacks** in Proof-of-Stake blockchain systems.

1. Upload blockchain node telemetry (CSV)
2. Run the analysis
3. Explore SHAP explanations and model metrics

If the classifier backend cannot be reached, results are generated locally
and clearly labelled as a demo analysis.
""")
