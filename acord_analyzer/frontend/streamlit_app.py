"""
Streamlit UI for the ACORD 25 certificate analyzer.

Provides a single-page interface for uploading a PDF, sending it to the
FastAPI service, and rendering the extracted data.

Run with: streamlit run acord_analyzer/frontend/streamlit_app.py
"""

import asyncio

import streamlit as st

from acord_analyzer.backend.services.pdf_service import Document
from acord_analyzer.frontend.client import SubmissionClient
from acord_analyzer.frontend.presentation import PresentationState, format_result

# --- Page setup ---
st.set_page_config(page_title="ACORD 25 Certificate Analyzer", layout="centered")

st.title("ACORD 25 Certificate Analyzer")
st.write("Upload a PDF; we'll validate it's an ACORD 25 and extract structured data.")

# --- Simple CSS tweaks ---
st.markdown(
    """
<style>
.block-container{max-width:860px;padding-top:1.25rem;}
.stButton>button{border-radius:10px;padding:.65rem 1rem;font-weight:600;}
</style>
""",
    unsafe_allow_html=True,
)

if "view" not in st.session_state:
    st.session_state.view = PresentationState()
if "uploader_key" not in st.session_state:
    st.session_state.uploader_key = 0

view: PresentationState = st.session_state.view


# --- Upload form ---
uploaded_file = st.file_uploader(
    "Upload ACORD 25 Certificate of Insurance (PDF)",
    type=["pdf"],
    accept_multiple_files=False,
    key=f"uploader-{st.session_state.uploader_key}",
)
view.select(uploaded_file.name if uploaded_file else "")

analyze_col, clear_col = st.columns([3, 1])
with analyze_col:
    submitted = st.button(
        "Analyze Certificate",
        type="primary",
        disabled=not view.can_submit,
        use_container_width=True,
    )
with clear_col:
    cleared = st.button("Clear", use_container_width=True)

if cleared:
    view.reset()
    # A new widget key empties the uploader
    st.session_state.uploader_key += 1
    st.rerun()

if submitted:
    document = None
    if uploaded_file is not None:
        document = Document(
            filename=uploaded_file.name,
            content=uploaded_file.getvalue(),
            media_type=uploaded_file.type or "application/pdf",
        )
    view.begin()
    with st.spinner("Analyzing your certificate. This may take a moment..."):
        outcome = asyncio.run(SubmissionClient().submit(document))
    view.finish(outcome)

# --- Results ---
if view.error:
    st.error(f"Error: {view.error}")

message = view.message()
if message:
    st.info(message)

if view.has_result and view.result is not None:
    st.subheader("Analysis Results")
    st.code(format_result(view.result), language="json")
