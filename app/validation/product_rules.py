"""Rule set and messages for product create/update requests."""
from typing import Any, Callable, Dict, Optional

from app.schemas.product import ProductPayload
from app.validation.rules import (
    Integer,
    Max,
    Min,
    Nullable,
    Numeric,
    Required,
    String,
    Unique,
    Validator,
)

PRODUCT_MESSAGES = {
    "product_name.required": "Nama produk wajib diisi.",
    "product_name.string": "Nama produk harus berupa teks.",
    "product_name.max": "Nama produk maksimal 255 karakter.",
    "product_name.unique": "Nama produk sudah digunakan, silakan pilih nama lain.",

    "description.string": "Deskripsi harus berupa teks.",

    "product_price.required": "Harga produk wajib diisi.",
    "product_price.numeric": "Harga harus berupa angka.",
    "product_price.min": "Harga tidak boleh kurang dari 0.",

    "stock.required": "Stok wajib diisi.",
    "stock.integer": "Stok harus berupa bilangan bulat.",
    "stock.min": "Stok tidak boleh kurang dari 0.",
}


def product_validator(name_taken: Callable[[Any], bool]) -> Validator:
    """
    Build the validator for a product request.

    Args:
        name_taken: Returns True when another product already uses the name.
            For updates it must ignore the product being updated.
    """
    rules = {
        "product_name": [Required(), String(), Max(255), Unique(name_taken)],
        "description": [Nullable(), String()],
        "product_price": [Required(), Numeric(), Min(0)],
        "stock": [Required(), Integer(), Min(0)],
    }
    return Validator(rules, PRODUCT_MESSAGES)


def validate_product(
    data: Optional[Dict[str, Any]],
    name_taken: Callable[[Any], bool],
) -> Dict[str, Any]:
    """
    Validate a product request body and normalize its values.

    Returns:
        The submitted product fields, with price as float and stock as int

    Raises:
        ValidationFailed: If any field breaks its rules
    """
    validated = product_validator(name_taken).validate(data or {})
    return ProductPayload(**validated).model_dump(exclude_unset=True)
