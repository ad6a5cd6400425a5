"""Per-user AI assist usage statistics from IDE activity logs."""
