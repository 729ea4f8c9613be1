"""Entrypoints - Ways into the application."""
