# Models
from .product import Product, Category
from .shelf import Shelf, ShelfSlot
from .stock import Stock

__all__ = [
    "Product",
    "Category",
    "Shelf",
    "ShelfSlot",
    "Stock"
]
