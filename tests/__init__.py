"""
Test suite for tagfolio application.

This module contains the unit tests for models, services, UI handlers and
components, health checks and the import task.
"""
