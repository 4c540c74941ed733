"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    SchemaRegistrationError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "SchemaRegistrationError",
]
