from dataclasses import dataclass
from decimal import Decimal

CURRENCY = "KES"


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal
    student_price: Decimal

    @property
    def student_savings(self) -> Decimal:
        return self.price - self.student_price


PRODUCTS: dict[str, Product] = {
    "polo": Product(id="polo", name="Polo Neck T-Shirt", price=Decimal("1500"), student_price=Decimal("1000")),
    "round": Product(id="round", name="Round Neck T-Shirt", price=Decimal("1200"), student_price=Decimal("600")),
}


def get_product_price(product: Product, is_student: bool) -> Decimal:
    return product.student_price if is_student else product.price


def calculate_order_total(tshirt_type: str, is_student: bool, quantity: int) -> Decimal:
    """
    Catalogue price of ``quantity`` t-shirts of ``tshirt_type``.

    Raises ``ValueError`` for a type the catalogue does not sell.
    """
    product = PRODUCTS.get(tshirt_type)
    if product is None:
        raise ValueError(f"Unknown t-shirt type: {tshirt_type}")
    return get_product_price(product, is_student) * quantity
