import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import streamlit as st

from api.orchestrator import load_metrics
from streamlit_app.state import init_state

init_state()

st.title("📊 Model Performance")

st.markdown("Evaluation metrics of the **hybrid ensemble** (Decision Tree + Random Forest).")

if st.button("Load Metrics"):
    with st.spinner("Loading..."):
        st.session_state["metrics_result"] = load_metrics()

result = st.session_state["metrics_result"]

if result is not None:
    if result.source == "demo":
        st.warning("🧪 Backend unavailable. Showing demo metrics.")

    m = result.metrics
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Accuracy", f"{m.accuracy * 100:.1f}%")
    c2.metric("Precision", f"{m.precision * 100:.1f}%")
    c3.metric("Recall", f"{m.recall * 100:.1f}%")
    c4.metric("F1-Score", f"{m.f1_score * 100:.1f}%")
