from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from cart_api.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    cart_id = Column(String(36), ForeignKey("carts.id", ondelete="CASCADE"), primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), primary_key=True)

    # zero oznacza brak pozycji, nigdy nie zapisujemy wiersza z zerem
    quantity = Column(Integer, nullable=False)

    cart = relationship("CartModel", back_populates="items")
    product = relationship("ProductModel")

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),)
