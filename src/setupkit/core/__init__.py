"""Core setup logic: configuration, state, conflict handling, settings and steps."""
