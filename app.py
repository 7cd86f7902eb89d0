"""Streamlit entry point: ``streamlit run app.py`` (serves pages/ as well)."""

from tagfolio.main import main

main()
