# repositories/order_repository.py
import threading

from pydantic import BaseModel, ConfigDict, Field


class Order(BaseModel):
    """
    Order record kept by the registry.
    Field values are opaque strings; the record is never mutated after insert.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_id: str = Field(alias="orderId")
    name: str = ""
    email: str = ""
    max: str = ""
    time: str = ""


class OrderRepository:
    """
    In-memory order store (process lifetime, no eviction).
    Every access goes through a single lock so concurrent request threads
    never see a torn map or two records under one id.
    """

    def __init__(self):
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    # -------------------------------------------
    # Insert (refuses to overwrite an existing id)
    # -------------------------------------------
    def insert_if_absent(self, order: Order) -> bool:
        if not order.order_id:
            raise ValueError("order_id must not be empty")

        with self._lock:
            if order.order_id in self._orders:
                return False
            self._orders[order.order_id] = order
            return True

    # -------------------------------------------
    # Lookup
    # -------------------------------------------
    def get_order(self, order_id: str) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def count(self) -> int:
        with self._lock:
            return len(self._orders)
