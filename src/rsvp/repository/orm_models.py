from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, CreatedAt, UpdatedAt


class RSVPSubmission(Base, CreatedAt, UpdatedAt):
    __tablename__ = TableNames.RSVP_SUBMISSIONS.value
    __table_args__ = (
        CheckConstraint("guests >= 1 AND guests <= 10", name="rsvp_submissions_guests_range"),
        CheckConstraint("length(name) >= 1", name="rsvp_submissions_name_not_empty"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    attending: Mapped[bool] = mapped_column(Boolean, nullable=False)
    guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<RSVPSubmission {self.id} {self.email} attending={self.attending}>"
