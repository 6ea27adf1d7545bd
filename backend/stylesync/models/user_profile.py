"""User profile model - the profile store this service reads identities from.

Profiles are written by the onboarding service; here they are only read.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from stylesync.db.database import Base


class UserProfile(Base):
    __tablename__ = "userprofiles"

    id: Mapped[int] = mapped_column(primary_key=True)
    public_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    profile_pic: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Declared interest tags, e.g. ["Streetwear", "Vintage"]
    interests: Mapped[list] = mapped_column(JSON, default=list)

    # Public profiles accept follows without approval
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
