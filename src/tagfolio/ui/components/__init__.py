"""Reusable Streamlit rendering components."""
