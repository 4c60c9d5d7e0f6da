"""Order routing and workstation assignment engine for a multi-branch dry-cleaning chain."""

__version__ = "0.1.0"
