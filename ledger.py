"""in-memory order ledger: customers, orders, line items and the two sales reports"""

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, MAX_PREC, ROUND_HALF_EVEN, localcontext

# constants
DISCOUNT_THRESHOLD = Decimal("500")
DISCOUNT_RATE = Decimal("0.10")
CENTS = Decimal("0.01")

# errors
class LedgerError(ValueError):
    """base for ledger validation failures"""

class InvalidArgument(LedgerError):
    """missing reference or blank required text"""

class InvalidRange(InvalidArgument):
    """numeric value outside its allowed domain"""

# helpers
@contextmanager
def _exact():
    """decimal context wide enough that sums and products never round"""
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        yield ctx

def _require_text(value, what: str) -> str:
    """return trimmed text or raise if blank"""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{what} cannot be empty")
    return value.strip()

def _require_positive_int(value, what: str) -> int:
    """return value if it is an int above zero"""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidRange(f"{what} must be greater than zero (got {value!r})")
    return value

def to_money(value) -> Decimal:
    """coerce int / str / float / Decimal to a finite Decimal"""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool):
        raise InvalidRange(f"not a price: {value!r}")
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise InvalidRange(f"not a price: {value!r}") from None
    elif isinstance(value, float):
        # go through str so 0.1 stays 0.1 and not its binary expansion
        amount = Decimal(str(value))
    else:
        raise InvalidRange(f"not a price: {value!r}")
    if not amount.is_finite():
        raise InvalidRange(f"not a price: {value!r}")
    return amount

# domain models
@dataclass(frozen=True)
class Customer:
    """customer identity; aggregation keys on id only"""
    id: int
    name: str

    def __post_init__(self):
        _require_positive_int(self.id, "customer id")
        object.__setattr__(self, "name", _require_text(self.name, "customer name"))

@dataclass(frozen=True)
class OrderItem:
    """one purchased line: product, quantity and unit price"""
    product_name: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "product_name", _require_text(self.product_name, "product name"))
        _require_positive_int(self.quantity, "quantity")
        price = to_money(self.unit_price)
        if price < 0:
            raise InvalidRange(f"price cannot be negative (got {price})")
        object.__setattr__(self, "unit_price", price)

    @property
    def total_price(self) -> Decimal:
        """quantity * unit price, unrounded"""
        with _exact():
            return self.quantity * self.unit_price

class Order:
    """a customer's cart; id and customer are fixed, lines can only be appended"""
    def __init__(self, id: int, customer: Customer):
        self._id = _require_positive_int(id, "order id")
        if customer is None:
            raise InvalidArgument("order must have a valid customer (null customer)")
        if not isinstance(customer, Customer):
            raise InvalidArgument(f"not a customer: {customer!r}")
        self._customer = customer
        self._items: list[OrderItem] = []

    def __repr__(self):
        return f"Order(id={self._id!r}, customer={self._customer!r})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def customer(self) -> Customer:
        return self._customer

    @property
    def items(self) -> tuple[OrderItem, ...]:
        """lines in insertion order"""
        return tuple(self._items)

    def add_item(self, item: OrderItem):
        """append a line; same product twice stays two lines"""
        if item is None:
            raise InvalidArgument("cannot add a null item to the order")
        if not isinstance(item, OrderItem):
            raise InvalidArgument(f"not an order item: {item!r}")
        self._items.append(item)

    @property
    def subtotal(self) -> Decimal:
        """sum of line totals before discount"""
        with _exact():
            return sum((i.total_price for i in self._items), Decimal("0"))

    @property
    def is_discounted(self) -> bool:
        """true once the subtotal is strictly over the threshold"""
        return self.subtotal > DISCOUNT_THRESHOLD

    def calculate_final_price(self) -> Decimal:
        """subtotal, minus 10% when over the threshold, rounded half-even to cents"""
        total = self.subtotal
        with _exact():
            if total > DISCOUNT_THRESHOLD:
                total -= total * DISCOUNT_RATE
            return total.quantize(CENTS, rounding=ROUND_HALF_EVEN)

# aggregate root
class Ledger:
    """append-only collection of orders plus on-demand reports"""
    def __init__(self):
        self._orders: list[Order] = []

    def __len__(self):
        return len(self._orders)

    def __iter__(self):
        return iter(tuple(self._orders))

    @property
    def orders(self) -> tuple[Order, ...]:
        """orders in insertion order"""
        return tuple(self._orders)

    def add_order(self, order: Order):
        """append an order"""
        if order is None:
            raise InvalidArgument("order cannot be null")
        if not isinstance(order, Order):
            raise InvalidArgument(f"not an order: {order!r}")
        self._orders.append(order)

    def find_order(self, order_id: int) -> Order | None:
        """first order with the given id or none"""
        return next((o for o in self._orders if o.id == order_id), None)

    def top_spender_name(self) -> str | None:
        """name of the customer id with the largest summed final price; first seen wins ties"""
        totals: dict[int, Decimal] = {}
        names: dict[int, str] = {}
        for order in self._orders:
            key = order.customer.id
            if key not in totals:
                totals[key] = Decimal("0")
                names[key] = order.customer.name
            with _exact():
                totals[key] += order.calculate_final_price()

        top_id = None
        for key, spent in totals.items():
            if top_id is None or spent > totals[top_id]:
                top_id = key
        return names[top_id] if top_id is not None else None

    def popular_products(self) -> list[tuple[str, int]]:
        """(product, units) pairs, most units first, ties in first-seen order"""
        units: dict[str, int] = {}
        for order in self._orders:
            for item in order.items:
                units[item.product_name] = units.get(item.product_name, 0) + item.quantity
        # sorted() is stable, so equal counts keep insertion order
        return sorted(units.items(), key=lambda kv: kv[1], reverse=True)
