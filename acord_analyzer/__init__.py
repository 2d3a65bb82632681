"""ACORD 25 certificate analyzer: FastAPI backend and Streamlit frontend."""
