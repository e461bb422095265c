from sqlalchemy import Column, Integer, String, Float, Text, DateTime, CheckConstraint
from sqlalchemy.sql import func

from app.database import Base


class Product(Base):
    """
    Product record in the catalog.

    Attributes:
        id: Unique identifier, assigned on insert
        product_name: Display name, unique across the catalog
        description: Optional free-form description
        product_price: Unit price (must be non-negative)
        stock: Available quantity (must be non-negative)
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    product_price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Database-level constraints back up request validation
    __table_args__ = (
        CheckConstraint('product_price >= 0', name='check_product_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, product_name='{self.product_name}', stock={self.stock})>"
