"""API routers for feedtags."""
