"""Terminal rendering for the status line."""
