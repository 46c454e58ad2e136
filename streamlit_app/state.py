import streamlit as st


def init_state():
    defaults = {
        "uploaded_name": None,
        "uploaded_bytes": None,
        "uploaded_type": None,
        "analysis_result": None,
        "analyzing": False,
        "shap_result": None,
        "metrics_result": None,
        "contact_sent": False,
    }

    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v


def select_file(name, content, content_type=None):
    """A new file discards every result computed for the previous one."""
    st.session_state["uploaded_name"] = name
    st.session_state["uploaded_bytes"] = content
    st.session_state["uploaded_type"] = content_type
    st.session_state["analysis_result"] = None
    st.session_state["shap_result"] = None


def run_pending_analysis(run):
    """Store the result of `run`; the Analyze button is re-enabled even if it raises."""
    try:
        st.session_state["analysis_result"] = run()
    finally:
        st.session_state["analyzing"] = False
