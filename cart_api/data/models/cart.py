#cart_api/data/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Index, text
from sqlalchemy.orm import relationship

from cart_api.data.database import Base

ACTIVE = "active"
CLOSED = "closed"


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    identity = Column(String(64), nullable=True)

    status = Column(String(16), nullable=False, default=ACTIVE)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        # jeden aktywny koszyk na identity, wymuszone przez baze
        Index(
            "uq_carts_active_identity",
            "identity",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_carts_identity_created", "identity", "created_at"),
    )
