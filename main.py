#!/usr/bin/env python3.13

#                        _        _
#  _ __ ___   __ _ _ __| | _____| |_
# | '_ ` _ \ / _` | '__| |/ / _ \ __|
# | | | | | | (_| | |  |   <  __/ |_
# |_| |_| |_|\__,_|_|  |_|\_\___|\__|
#  | | ___  __| | __ _  ___ _ __
#  | |/ _ \/ _` |/ _` |/ _ \ '__|
#  | |  __/ (_| | (_| |  __/ |
#  |_|\___|\__,_|\__, |\___|_|      🧾
#                |___/

# console shell over ledger.py; all rules live there, this file only
# parses commands, builds entities and prints reports

import signal
import sys
import inspect
from decimal import Decimal
from typing import Callable

from termcolor import cprint, colored
from colorama import just_fix_windows_console as enable_windows_ansi_interpretation

from ledger import (
    Customer,
    InvalidArgument,
    InvalidRange,
    Ledger,
    Order,
    OrderItem,
    to_money,
)

# fix windows terminal misinterpreting ansi escape sequences
enable_windows_ansi_interpretation()

# constants
CURRENCY = "EUR"
DISCOUNT_LABEL = "10% discount applied"

# helpers
def safe_int(value: str):
    """return int value or none if invalid"""
    try:
        return int(value)
    except ValueError:
        return None

def parse_int(value: str, what: str) -> int:
    """int from user input, invalid text reported as a range error"""
    v = safe_int(value)
    if v is None:
        raise InvalidRange(f"{what} must be a whole number (got {value!r})")
    return v

def parse_boolean_input(prompt: str, handle_invalid: bool = False) -> bool:
    """parse y/n style input; optionally warn on invalid"""
    p = prompt.lower().strip()
    if p in ("y", "yes"):
        return True
    if p in ("n", "no"):
        return False
    if handle_invalid:
        cprint("invalid input, please try again.", "red")
    return False

def format_order_line(order: Order) -> str:
    """'Order <id> (<name>): <amount> EUR' plus discount note"""
    line = f"Order {order.id} ({order.customer.name}): {order.calculate_final_price()} {CURRENCY}"
    if order.is_discounted:
        line += f" ({DISCOUNT_LABEL})"
    return line

def format_product_line(name: str, quantity: int) -> str:
    """'<name>: <quantity> units sold'"""
    return f"{name}: {quantity} units sold"

# session state
class LedgerManager:
    """own the ledger, known customers and the current order selection"""
    def __init__(self, ledger: Ledger | None = None):
        self.ledger = ledger if ledger is not None else Ledger()
        self.customers: dict[int, Customer] = {}
        self.current_order_id: int | None = None

    def _get_order(self, oid: int | None):
        """return order object by id or none"""
        if oid is None:
            return None
        return self.ledger.find_order(oid)

    # customers
    def add_customer(self, customer_id: str, *name: str):
        """register a customer under an id"""
        cid = parse_int(customer_id, "customer id")
        customer = Customer(cid, " ".join(name))
        if cid in self.customers:
            cprint(f"customer #{cid} already exists", "red"); return
        self.customers[cid] = customer
        cprint(f"customer #{cid} {colored(customer.name, 'yellow', attrs=['bold'])} added", "green")
        return customer

    def list_customers(self):
        """list known customers"""
        if not self.customers:
            cprint("no customers found", "red"); return
        for c in self.customers.values():
            print(f"#{c.id}: {c.name}")

    # orders
    def create_order(self, order_id: str, customer_id: str):
        """create an order for a known customer and select it"""
        oid = parse_int(order_id, "order id")
        cid = parse_int(customer_id, "customer id")
        customer = self.customers.get(cid)
        if customer is None:
            cprint(f"customer #{cid} not found", "red"); return
        order = Order(oid, customer)
        if self._get_order(oid) is not None:
            cprint(f"order #{oid} already exists", "red"); return
        self.ledger.add_order(order)
        self.current_order_id = oid
        cprint(f"order #{oid} created for {customer.name}", "green")
        return order

    def switch_order(self, order_id: str):
        """switch active order id"""
        oid = parse_int(order_id, "order id")
        if self._get_order(oid) is None:
            cprint("order not found", "red"); return
        if self.current_order_id == oid:
            cprint("already current order", "yellow"); return
        self.current_order_id = oid
        cprint(f"switched to order #{oid}", "green")

    def add_order_item(self, quantity: str, unit_price: str, *product: str):
        """add a line to the current order"""
        order = self._get_order(self.current_order_id)
        if order is None:
            cprint("no current order selected, use 'order create' or 'order switch'", "yellow"); return
        item = OrderItem(" ".join(product), parse_int(quantity, "quantity"), to_money(unit_price))
        order.add_item(item)
        cprint(f"added {item.quantity} x {item.product_name} to order #{order.id}", "green")
        return item

    def list_orders(self):
        """print every order with its final price"""
        if not self.ledger:
            cprint("no orders found", "red"); return
        for order in self.ledger:
            self.print_order(order)

    def print_order(self, order: Order):
        """print single order summary"""
        marker = colored(" *", "blue") if order.id == self.current_order_id else ""
        print(format_order_line(order) + marker)
        for item in order.items:
            print(f"\t{item.quantity} x {item.product_name} @ {item.unit_price}")

    # reports
    def report_top_spender(self):
        """print the customer with the highest summed final price"""
        name = self.ledger.top_spender_name()
        print(f"top spender: {name if name is not None else 'not found'}")

    def report_popular_products(self):
        """print products ranked by units sold"""
        products = self.ledger.popular_products()
        cprint("popular products", "green", attrs=["bold"])
        if not products:
            cprint("no data", "red"); return
        for name, quantity in products:
            print(f" - {format_product_line(name, quantity)}")

    def load_demo(self):
        """seed the two sample customers and orders"""
        alice = Customer(1, "Alice Popescu")
        bob = Customer(2, "Bob Ionescu")
        if alice.id in self.customers or bob.id in self.customers:
            cprint("demo data clashes with existing customers", "red"); return
        if self._get_order(101) or self._get_order(102):
            cprint("demo data clashes with existing orders", "red"); return
        self.customers[alice.id] = alice
        self.customers[bob.id] = bob

        first = Order(101, alice)
        first.add_item(OrderItem("Mouse USB", 2, Decimal("50")))
        self.ledger.add_order(first)

        second = Order(102, bob)
        second.add_item(OrderItem("Laptop", 1, Decimal("1000")))
        second.add_item(OrderItem("Mouse USB", 1, Decimal("50")))
        self.ledger.add_order(second)

        cprint("demo data loaded (orders #101 and #102)", "green")

# command infrastructure
class Command:
    """bind a command name to a function"""
    def __init__(self, name: str, function: Callable, description: str):
        self.name = name
        self._fn = function
        self.description = description

    def execute(self, tokens: list[str]):
        """validate arg count and invoke function"""
        sig = inspect.signature(self._fn)
        params = list(sig.parameters.values())
        required = sum(
            p.default == inspect.Parameter.empty and p.kind in (
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                inspect.Parameter.POSITIONAL_ONLY
            )
            for p in params
        )
        variadic = any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params)
        # a trailing *words parameter needs at least one word
        if variadic:
            required += 1
        upper = len(tokens) if variadic else len(params)
        if not (required <= len(tokens) <= upper):
            expected = f"{required}+" if variadic else f"{required}-{len(params)}"
            cprint(f"invalid args for '{self.name}' (expected {expected}, got {len(tokens)})", "red")
            return
        return self._fn(*tokens)

class CommandParser:
    """simple repl parser"""
    def __init__(self):
        self.commands: list[Command] = [
            Command("help", self.show_help, "show this help"),
            Command("h", self.show_help, "alias help"),
            Command("quit", self.quit, "exit program"),
            Command("exit", lambda: cprint("use quit to exit", "yellow"), "alias quit"),
        ]

    def parse_and_execute(self, input_str: str):
        """parse the raw input string and attempt to execute a command"""
        tokens = input_str.strip().split()
        if not tokens:
            return
        # longest name first so "order item add" beats "order"
        for cmd in sorted(self.commands, key=lambda c: len(c.name.split()), reverse=True):
            parts = cmd.name.split()
            if tokens[:len(parts)] != parts:
                continue
            args = tokens[len(parts):]
            try:
                return cmd.execute(args)
            except InvalidRange as e:
                cprint(f"[data error]: you entered an invalid numeric value. details: {e}", "red")
            except InvalidArgument as e:
                cprint(f"[argument error]: a required piece of information is missing. details: {e}", "red")
            except Exception as e:
                cprint(f"[system error]: an unexpected problem occurred: {e}", "red")
            return
        cprint("unknown command. type 'help'", "red")

    def show_help(self):
        """display help with all available command names and descriptions"""
        cprint("available commands:", "green", attrs=["bold"])
        width = max(len(c.name) for c in self.commands)
        for cmd in self.commands:
            sig = inspect.signature(cmd._fn)
            params = " ".join(
                f"<{p}...>" if prm.kind == inspect.Parameter.VAR_POSITIONAL
                else f"<{p}>" if prm.default == inspect.Parameter.empty else f"[{p}]"
                for p, prm in sig.parameters.items()
            )
            line = f"{colored(cmd.name,'blue')} {colored(params,'cyan')}".strip()
            print(line.ljust(width + 25), "-", cmd.description)

    @staticmethod
    def quit():
        """interactive quit confirmation"""
        ans = input(colored("are you sure you want to quit? (y/N): ", "yellow"))
        if parse_boolean_input(ans, handle_invalid=True):
            cprint("okay, see ya!", "green")
            sys.exit(0)
        cprint("continuing...", "green")

    def start_repl(self):
        """main repl loop"""
        while True:
            try:
                user_input = input(colored("\n> ", "blue")).strip()
            except EOFError:
                print()
                break
            if user_input:
                self.parse_and_execute(user_input)

# application wiring
class Application:
    """bootstrap objects, run command-line args, then start repl"""
    def __init__(self, *args: str, interactive: bool = True):
        self.manager = LedgerManager()
        self.parser = CommandParser()

        self.parser.commands += [
            Command("demo", self.manager.load_demo, "load sample customers and orders"),
            Command("customer add", self.manager.add_customer, "add customer"),
            Command("customer list", self.manager.list_customers, "list customers"),
            Command("order create", self.manager.create_order, "create order"),
            Command("order switch", self.manager.switch_order, "switch current order"),
            Command("order list", self.manager.list_orders, "list orders with final prices"),
            Command("order item add", self.manager.add_order_item, "add item to current order"),
            Command("report top-spender", self.manager.report_top_spender, "customer with highest spend"),
            Command("report popular", self.manager.report_popular_products, "products by units sold"),
        ]

        if not interactive:
            if args:
                self.parser.parse_and_execute(" ".join(args))
            return

        cprint("""
market ledger 🧾
orders, discounts and who bought the most
    """, "green", attrs=["bold"])

        print("""for more information, type 'help' or 'h' at any time.
to exit the program, type 'quit'.""")

        if args:
            self.parser.parse_and_execute(" ".join(args))
        self.parser.start_repl()

# entry point
def main():
    """entrypoint wrapper"""
    signal.signal(signal.SIGINT, SignalHandler.sigint)
    args = sys.argv[1:]
    Application(*args)

# signal handler
class SignalHandler:
    """custom ctrl+c handler to nag user politely"""
    @staticmethod
    def sigint(_, __):
        """handle ctrl+c"""
        cprint("\nnext time, use quit!", "yellow")
        sys.exit(0)

if __name__ == "__main__":
    main()
