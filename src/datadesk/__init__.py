"""datadesk - admin backend for read-only SQL exports and data requests."""

__version__ = "1.0.0"
