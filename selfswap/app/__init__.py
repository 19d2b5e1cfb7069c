"""Application-level settings and metadata."""
