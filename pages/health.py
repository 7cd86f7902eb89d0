"""
Health check page for Streamlit application.

Streamlit serves this as the /health page next to the gallery.
"""

from tagfolio.health import render_health_page

render_health_page()
