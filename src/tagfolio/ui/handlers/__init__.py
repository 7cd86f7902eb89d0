"""Session-state handlers behind the Streamlit widgets."""
