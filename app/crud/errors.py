class DuplicateError(Exception):
    """Raised when a unique constraint is violated (e.g., username, asset number)."""
