"""CLI sub-applications for feedtags."""
