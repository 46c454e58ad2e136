import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import streamlit as st

from api.orchestrator import load_stored_shap, run_shap_analysis
from pipeline.export import explanation_to_json, shap_export_file_name
from pipeline.helpers import format_feature_name
from streamlit_app.state import init_state
from streamlit_app.utils.shap_utils import (
    comparison_frame,
    hybrid_frame,
    individual_frame,
    sample_frame
)

# -------------------------------------------------
# Page config
# -------------------------------------------------
st.set_page_config(page_title="SHAP Analysis", layout="wide")
init_state()

st.title("🧠 SHAP Explainable AI")
st.markdown("""
See which blockchain metrics contribute most to attack detection and get
detailed explanations for individual nodes.
""")

# -------------------------------------------------
# Sources
# -------------------------------------------------
c1, c2 = st.columns(2)

with c1:
    has_file = st.session_state["uploaded_bytes"] is not None
    if has_file:
        st.write(f"Uploaded file: **{st.session_state['uploaded_name']}**")
    else:
        st.info("Upload a dataset to run a live SHAP analysis.")

    if st.button("⚡ Generate Live SHAP Analysis", disabled=not has_file):
        with st.spinner("Analyzing..."):
            st.session_state["shap_result"] = run_shap_analysis(
                st.session_state["uploaded_name"],
                st.session_state["uploaded_bytes"],
                content_type=st.session_state["uploaded_type"]
            )

with c2:
    if st.button("👁️ View Stored Analysis"):
        with st.spinner("Loading..."):
            st.session_state["shap_result"] = load_stored_shap()

result = st.session_state["shap_result"]

if result is None:
    st.info("Upload a CSV file or load the stored analysis to explore AI explainability.")
    st.stop()

if result.status == "error":
    st.error(f"❌ {result.message}")
    st.stop()

if result.status in ("local", "demo"):
    st.warning(f"🧪 {result.message}")
elif result.status == "live":
    st.success(f"✅ Live SHAP analysis completed for: {result.file_name}")

model = result.explanation

# -------------------------------------------------
# Overview
# -------------------------------------------------
o1, o2, o3 = st.columns(3)
o1.metric("Features Analyzed", model.analysis_metadata.total_features_analyzed)
o2.metric(
    "Top Risk Factor",
    format_feature_name(model.hybrid_model_shap.hybrid_statistics.most_important_feature)
)
o3.metric("SHAP Methods", len(model.analysis_metadata.shap_methods))

# -------------------------------------------------
# Individual model
# -------------------------------------------------
st.subheader("📊 Individual Model Analysis (Random Forest)")
ind_df = individual_frame(model)
st.bar_chart(ind_df.set_index("feature")["importance"])
st.dataframe(ind_df, use_container_width=True)

# -------------------------------------------------
# Hybrid model
# -------------------------------------------------
st.subheader("📈 Hybrid Model Analysis (Weighted DT + RF)")
hyb_df = hybrid_frame(model)
st.bar_chart(hyb_df.set_index("feature")[["dt_contribution", "rf_contribution"]])
st.dataframe(hyb_df, use_container_width=True)

meta = model.hybrid_model_shap.hybrid_analysis_metadata
m1, m2, m3, m4 = st.columns(4)
m1.metric("DT Weight", f"{meta.dt_weight * 100:.0f}%")
m2.metric("RF Weight", f"{meta.rf_weight * 100:.0f}%")
m3.metric("DT Accuracy", f"{meta.dt_accuracy * 100:.1f}%")
m4.metric("RF Accuracy", f"{meta.rf_accuracy * 100:.1f}%")

# -------------------------------------------------
# Comparison
# -------------------------------------------------
st.subheader("⚖️ Individual vs Hybrid")
st.dataframe(comparison_frame(model), use_container_width=True)

# -------------------------------------------------
# Samples
# -------------------------------------------------
if model.sample_explanations:
    st.subheader("🔎 Individual Sample Explanations")

    for sample in model.sample_explanations[:4]:
        with st.expander(f"Sample Node #{sample.sample_id}: {sample.prediction}"):
            st.write(f"Prediction confidence: **{sample.predicted_probability * 100:.1f}%**")
            st.progress(min(max(sample.predicted_probability, 0.0), 1.0))
            st.dataframe(sample_frame(sample), use_container_width=True)

    st.info("""
**How to interpret this:**
- Positive SHAP values push a node towards **Malicious**
- Negative SHAP values push it towards **Benign**
- Feature value is the actual measurement for that node
""")

# -------------------------------------------------
# Export
# -------------------------------------------------
st.download_button(
    "⬇️ Download SHAP Results (JSON)",
    explanation_to_json(model),
    file_name=shap_export_file_name(),
    mime="application/json"
)
