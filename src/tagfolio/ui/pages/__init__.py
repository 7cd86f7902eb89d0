"""Page sections of the gallery application."""
