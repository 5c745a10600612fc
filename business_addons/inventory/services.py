"""
Inventory services and lifecycle hooks.
"""

from decimal import Decimal

from addon_platform.addons.services import service_registry

STOCK_SERVICE = 'inventory.stock'


class StockService:
    """Products and their on-hand quantity per warehouse."""

    _products = [
        {'sku': 'DSK-100', 'name': 'Standing desk', 'price': Decimal('449.00')},
        {'sku': 'CHR-200', 'name': 'Office chair', 'price': Decimal('189.50')},
        {'sku': 'LMP-300', 'name': 'Desk lamp', 'price': Decimal('39.90')},
    ]
    _stock = {
        ('DSK-100', 'main'): 12,
        ('CHR-200', 'main'): 40,
        ('CHR-200', 'annex'): 5,
    }

    def products(self):
        return [dict(product, price=str(product['price'])) for product in self._products]

    def quantity(self, sku):
        return sum(qty for (product_sku, _), qty in self._stock.items() if product_sku == sku)

    def levels(self):
        return [
            {'sku': product['sku'], 'on_hand': self.quantity(product['sku'])}
            for product in self._products
        ]


def initialize():
    service_registry.register(STOCK_SERVICE, StockService, {'addon': 'inventory'})


def cleanup():
    service_registry.unregister(STOCK_SERVICE)
