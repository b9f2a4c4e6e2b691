"""Custom exceptions for database operations."""


class DatabaseError(Exception):
    """Base exception for database errors."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Database not configured or connection failed."""
    pass


class DatabaseConstraintError(DatabaseError):
    """Unique key or foreign key violation."""
    pass


class DatabaseOperationError(DatabaseError):
    """General database operation failed."""
    pass


class EntityNotFoundError(DatabaseError):
    """Requested meeting, task or record does not exist."""
    pass
