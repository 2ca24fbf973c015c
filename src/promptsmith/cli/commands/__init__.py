"""Top-level promptsmith commands."""
