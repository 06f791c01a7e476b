"""Bootstrap data for development."""
