import logging
from typing import Iterable, List, Optional

from order_service.schemas import CartItem, Product

logger = logging.getLogger(__name__)

# 가격 기준 상품 목록 (런타임에 변경되지 않음)
PRODUCTS = (
    Product(id=1, name="Mechanical RGB Keyboard", unit_price=10499),
    Product(id=2, name="4K UltraWide Monitor", unit_price=39999),
    Product(id=3, name="Wireless Gaming Mouse", unit_price=6499),
    Product(id=4, name="Noise Cancelling Headphones", unit_price=19999),
    Product(id=5, name="Gaming PC Case", unit_price=12999),
    Product(id=6, name="Ergonomic Office Chair", unit_price=27999),
    Product(id=7, name="Streamer Microphone", unit_price=14999),
    Product(id=8, name="External SSD 2TB", unit_price=15999),
    Product(id=9, name="Pendrive", unit_price=1),
)

class Catalog:
    def __init__(self, products: Iterable[Product] = PRODUCTS):
        self._products = {product.id: product for product in products}

    def get(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def list_products(self) -> List[Product]:
        return list(self._products.values())

    def price_items(self, items: Iterable[CartItem]) -> int:
        """
        Sums unit_price * quantity for every item whose id is in the catalog.
        Client-supplied prices are never read; unknown ids contribute nothing.
        """
        total = 0
        for item in items:
            product = self.get(item.id)
            if product is None:
                logger.warning(f"Skipping unknown product id {item.id} in cart.")
                continue
            total += product.unit_price * item.quantity
        return total
