"""
Product Repository - Data Access Layer
"""
import logging
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import BusinessRuleViolation, DuplicateProductNameError
from app.models.product import Product
from app.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)

STOCK_AVAILABLE_MESSAGE = "Produk tidak bisa dihapus karena stok masih tersedia."


class ProductRepositoryInterface(Protocol):
    """Operations the product routes need from storage."""

    def all(self, page: int = 1) -> Page[Product]: ...

    def find(self, product_id: int) -> Optional[Product]: ...

    def name_exists(self, product_name: str, ignore_id: Optional[int] = None) -> bool: ...

    def create(self, fields: Dict[str, Any]) -> Product: ...

    def update(self, product: Product, fields: Dict[str, Any]) -> Product: ...

    def delete(self, product: Product) -> None: ...


class ProductRepository:
    """
    SQLAlchemy-backed product storage.

    Every mutation is committed before returning. The unique index on
    ``product_name`` is the final word on name clashes; ``name_exists`` only
    gives the validator a friendly early answer.
    """

    def __init__(self, db: Session, per_page: int = 5):
        self.db = db
        self.per_page = per_page

    def all(self, page: int = 1) -> Page[Product]:
        """
        Get one page of products ordered by ID.

        Args:
            page: Page number (1-indexed)

        Returns:
            Page with items and pagination totals
        """
        query = self.db.query(Product).order_by(Product.id.asc())
        return paginate(query, page, self.per_page)

    def find(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def name_exists(self, product_name: str, ignore_id: Optional[int] = None) -> bool:
        """
        Check whether a product other than ``ignore_id`` uses this name.

        Args:
            product_name: Name to look up
            ignore_id: ID of the product being updated, if any
        """
        query = self.db.query(Product.id).filter(Product.product_name == product_name)
        if ignore_id is not None:
            query = query.filter(Product.id != ignore_id)
        return query.first() is not None

    def create(self, fields: Dict[str, Any]) -> Product:
        """
        Create a new product.

        Args:
            fields: Validated product fields

        Returns:
            Created product with its generated ID

        Raises:
            DuplicateProductNameError: If the name was taken in the meantime
        """
        product = Product(**fields)
        self.db.add(product)
        self._commit(fields.get("product_name"))
        self.db.refresh(product)
        logger.info(f"Created product {product.id} ({product.product_name})")
        return product

    def update(self, product: Product, fields: Dict[str, Any]) -> Product:
        """
        Update an existing product.

        Args:
            product: Product to change
            fields: Validated fields to write; unsent fields keep their value

        Returns:
            Updated product

        Raises:
            DuplicateProductNameError: If the new name was taken in the meantime
        """
        for field, value in fields.items():
            setattr(product, field, value)

        self._commit(fields.get("product_name"))
        self.db.refresh(product)
        logger.info(f"Updated product {product.id}")
        return product

    def delete(self, product: Product) -> None:
        """
        Delete a product that has no stock left.

        The row is re-read with a lock so the stock check and the delete see
        the same value.

        Args:
            product: Product to delete

        Raises:
            BusinessRuleViolation: If the product still has stock
        """
        self.db.refresh(product, with_for_update=True)

        if product.stock > 0:
            self.db.rollback()
            logger.warning(
                f"Refused to delete product {product.id}: {product.stock} item(s) in stock"
            )
            raise BusinessRuleViolation(STOCK_AVAILABLE_MESSAGE)

        product_id = product.id
        self.db.delete(product)
        self.db.commit()
        logger.info(f"Deleted product {product_id}")

    def _commit(self, product_name: Optional[str]) -> None:
        """Commit, turning a name clash into a domain error."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if product_name is not None and self.name_exists(product_name):
                raise DuplicateProductNameError(product_name)
            raise
