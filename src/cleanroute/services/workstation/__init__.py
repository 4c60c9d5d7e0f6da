"""Workstation assignments, load balancing and staff metrics."""
