import sqlalchemy as sa
from sqlalchemy import Boolean, CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, CreatedAt


class GuestMessage(Base, CreatedAt):
    __tablename__ = TableNames.GUEST_MESSAGES.value
    __table_args__ = (
        CheckConstraint("length(name) >= 1", name="guest_messages_name_not_empty"),
        CheckConstraint("length(message) >= 1", name="guest_messages_message_not_empty"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    # Only flipped to true by an operator, see `cli.py approve-message`
    approved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.false(), index=True
    )

    def __repr__(self) -> str:
        return f"<GuestMessage {self.id} from {self.name} approved={self.approved}>"
