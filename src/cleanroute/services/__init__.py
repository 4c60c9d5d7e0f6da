"""Routing, workstation, sorting and classification services."""
