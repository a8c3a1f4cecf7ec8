"""HTTP response helpers."""
