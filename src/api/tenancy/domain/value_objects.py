"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass

# PostgreSQL truncates identifiers longer than this (NAMEDATALEN - 1 bytes).
MAX_DATABASE_NAME_BYTES = 63


class InvalidTenantDatabaseNameError(ValueError):
    """Raised when an identifier cannot become a valid tenant database name.

    Covers empty identifiers and names longer than the PostgreSQL identifier
    limit once the prefix is added.
    """

    pass


@dataclass(frozen=True)
class UserId:
    """Identifier for a registered account.

    Opaque string assigned at signup; never reused. The account's tenant
    database is derived from it when no explicit name is stored.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Raises:
            ValueError: If value is empty or whitespace
        """
        if not value or not value.strip():
            raise ValueError("UserId cannot be empty")
        return cls(value=value.strip())


@dataclass(frozen=True)
class TenantDatabaseName:
    """Resolved, stable name of a tenant's isolated database.

    Every tenant database name carries the configured prefix. A bare
    identifier and its prefixed form normalize to the same name, so the
    registry caches a single connection for both.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def normalize(cls, identifier: str, prefix: str) -> TenantDatabaseName:
        """Build a database name from a stored or bare identifier.

        Args:
            identifier: Stored tenant database name, with or without prefix
            prefix: Required tenant database prefix

        Returns:
            TenantDatabaseName starting with ``prefix``

        Raises:
            InvalidTenantDatabaseNameError: If identifier is empty or the
                result exceeds the PostgreSQL identifier limit
        """
        identifier = identifier.strip()
        if not identifier:
            raise InvalidTenantDatabaseNameError(
                "Tenant database identifier cannot be empty"
            )

        value = identifier if identifier.startswith(prefix) else f"{prefix}{identifier}"

        if len(value.encode("utf-8")) > MAX_DATABASE_NAME_BYTES:
            raise InvalidTenantDatabaseNameError(
                f"Tenant database name exceeds {MAX_DATABASE_NAME_BYTES} bytes: {value}"
            )

        return cls(value=value)

    @classmethod
    def derive(cls, user_id: UserId, prefix: str) -> TenantDatabaseName:
        """Derive the database name of an account with no stored name.

        Accounts created before explicit naming existed keep resolving to
        ``<prefix><user id>``.
        """
        return cls.normalize(user_id.value, prefix)


@dataclass(frozen=True)
class UserProfile:
    """The parts of a user profile that tenancy cares about.

    Attributes:
        id: The account identifier
        tenant_db_name: Explicitly stored tenant database name, if any
    """

    id: UserId
    tenant_db_name: str | None = None
