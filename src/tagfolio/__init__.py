"""
tagfolio - Personal tagged photo gallery with Streamlit

A web application for publishing a personal photo gallery with features including:
- Single-owner email/password authentication (Firebase Authentication)
- Tagged photo entries stored in Google Cloud Firestore
- Public gallery with tag filtering
- Locally persisted profile card and theme
"""

__version__ = "0.1.0"
__author__ = "tagfolio"
__description__ = "Personal tagged photo gallery with Streamlit"
