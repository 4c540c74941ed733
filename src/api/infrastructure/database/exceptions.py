"""Database-specific exceptions shared by the control plane and tenant databases."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database cannot be reached.

    Covers unreachable hosts, rejected credentials and handshake timeouts.
    Every caller waiting on the same tenant connection attempt receives
    the same instance.
    """

    def __init__(self, message: str, database: str | None = None):
        super().__init__(message)
        self.database = database


class SchemaRegistrationError(DatabaseError):
    """Raised when a record table cannot be created on a tenant database.

    "Already exists" conditions never raise this error.
    """

    def __init__(self, message: str, database: str, table: str):
        super().__init__(message)
        self.database = database
        self.table = table
