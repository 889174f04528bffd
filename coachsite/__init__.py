"""Backend service for the coaching marketing site and its admin dashboard."""
