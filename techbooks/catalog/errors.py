class CatalogError(Exception):
    """Raised when the upstream book catalogue cannot be queried."""
