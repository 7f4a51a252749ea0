"""Core ordering logic: pure functions over sections and items, plus services."""
