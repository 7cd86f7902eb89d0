"""Command line tasks for tagfolio."""
