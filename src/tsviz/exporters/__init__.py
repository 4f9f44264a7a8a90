"""Output exporters for transformed payloads."""
