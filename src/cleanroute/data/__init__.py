"""Data access helpers over the document store."""
