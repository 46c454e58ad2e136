import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import streamlit as st

from api.orchestrator import submit_contact
from api.schemas import ContactMessage
from streamlit_app.state import init_state

init_state()

st.title("✉️ Contact Us")

if st.session_state["contact_sent"]:
    st.success("Thank you! Your message has been sent successfully.")
    if st.button("Send another message"):
        st.session_state["contact_sent"] = False
        st.rerun()
    st.stop()

with st.form("contact_form", clear_on_submit=True):
    name = st.text_input("Name")
    email = st.text_input("Email")
    message = st.text_area("Message")
    submitted = st.form_submit_button("Send")

if submitted:
    if not (name.strip() and email.strip() and message.strip()):
        st.error("Please fill in every field.")
    else:
        with st.spinner("Sending..."):
            sent = submit_contact(ContactMessage(name=name, email=email, message=message))
        st.session_state["contact_sent"] = sent
        st.rerun()
