import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import streamlit as st
import pandas as pd

from api.orchestrator import run_analysis
from pipeline.export import RESULTS_FILE_NAME, results_frame, results_to_csv
from pipeline.helpers import format_feature_name
from streamlit_app.state import init_state, run_pending_analysis

init_state()

st.title("📊 Analysis Results")

# -----------------------------
# Safety check
# -----------------------------
if st.session_state["uploaded_bytes"] is None:
    st.warning("Please upload a dataset first.")
    st.stop()

st.write(f"Selected file: **{st.session_state['uploaded_name']}**")


def _start_analysis():
    st.session_state["analyzing"] = True


st.button(
    "🚀 Analyze Dataset",
    disabled=st.session_state["analyzing"],
    on_click=_start_analysis
)

# -----------------------------
# Run analysis (one at a time)
# -----------------------------
if st.session_state["analyzing"]:
    with st.spinner("Analyzing..."):
        run_pending_analysis(lambda: run_analysis(
            st.session_state["uploaded_name"],
            st.session_state["uploaded_bytes"],
            content_type=st.session_state["uploaded_type"]
        ))
    st.rerun()

# -----------------------------
# Always show results if present
# -----------------------------
result = st.session_state["analysis_result"]

if result is None:
    st.stop()

if result.status == "error":
    st.error(f"❌ {result.message}")
    st.stop()

if result.status == "fallback":
    st.warning(f"🧪 Demo mode: {result.message}")
else:
    st.success("✅ Analysis completed")

data = result.data
stats = data.statistics

# ---- Summary cards ----
st.subheader("📈 Prediction Summary")

col1, col2, col3, col4 = st.columns(4)
col1.metric("Total Nodes", f"{stats.total_samples:,}")
col2.metric("Benign Nodes", f"{stats.benign_nodes:,}", delta=f"{stats.benign_percentage}%")
col3.metric("Malicious Nodes", f"{stats.malicious_nodes:,}", delta=f"{stats.malicious_percentage}%",
            delta_color="inverse")
col4.metric("Avg Risk Score", stats.average_risk_score)

col5, col6 = st.columns(2)
col5.metric("High Risk (> 0.7)", f"{stats.high_risk_nodes:,}")
col6.metric("Low Risk (< 0.3)", f"{stats.low_risk_nodes:,}")

# ---- Top risk factors ----
if data.feature_importance:
    st.subheader("🔝 Top Risk Factors")

    top = data.feature_importance[:5]
    max_importance = top[0].importance or 1.0

    for feature in top:
        c1, c2, c3 = st.columns([2, 5, 1])
        c1.write(format_feature_name(feature.feature))
        c2.progress(min(feature.importance / max_importance, 1.0))
        c3.write(f"{feature.importance * 100:.1f}%")

# ---- Results table + download ----
st.subheader("📋 Node Results")

table = results_frame(data.predictions, data.probabilities)
st.dataframe(table, use_container_width=True, height=500)

risk_counts = table["Risk_Level"].value_counts().reindex(["High", "Medium", "Low"], fill_value=0)
st.bar_chart(pd.DataFrame({"nodes": risk_counts}))

st.download_button(
    "⬇️ Download Results CSV",
    results_to_csv(data),
    file_name=RESULTS_FILE_NAME,
    mime="text/csv"
)
