"""Sorting window calculation and delivery scheduling."""
