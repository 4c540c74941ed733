"""SQLAlchemy ORM model for the control-plane users table.

Only the columns tenancy needs are mapped here; signup and login write the
rest of the profile.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class UserProfileModel(Base, TimestampMixin):
    """ORM model for the users table.

    ``tenant_db_name`` is NULL for accounts created before explicit tenant
    naming; those accounts resolve to the derived ``<prefix><id>`` name.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    farm_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tenant_db_name: Mapped[str | None] = mapped_column(
        String(63), nullable=True, unique=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<UserProfileModel(id={self.id}, tenant_db_name={self.tenant_db_name})>"
        )
