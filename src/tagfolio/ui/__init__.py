"""Streamlit user interface for tagfolio application."""
