"""Framework adapters (optional dependencies)."""
