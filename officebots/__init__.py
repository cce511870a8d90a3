"""Office automation jobs: bug hunter rotation notifier and invoice helper."""

__version__ = "0.1.0"
