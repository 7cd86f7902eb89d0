"""Configuration for UI unit tests."""

from unittest.mock import patch

import pytest
import streamlit as st


class FakeSessionState(dict):
    """Dict with attribute access, standing in for st.session_state."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError as e:
            raise AttributeError(key) from e

    def __setattr__(self, key, value):
        self[key] = value

    def __delattr__(self, key):
        del self[key]


@pytest.fixture(autouse=True)
def disable_streamlit_caching():
    """Fixture to disable streamlit caching for all tests in this module."""
    st.cache_data.clear()
    st.cache_resource.clear()
    with patch("streamlit.cache_data", new=lambda *args, **kwargs: lambda f: f), \
         patch("streamlit.cache_resource", new=lambda *args, **kwargs: lambda f: f):
        yield


@pytest.fixture
def session_state():
    """Replace st.session_state with a plain fake for the test."""
    state = FakeSessionState()
    with patch("streamlit.session_state", state):
        yield state
