"""Services backing the self-update workflow."""
