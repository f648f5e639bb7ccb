# services/order_service.py
import logging
import os
import random

from repositories.order_repository import Order, OrderRepository
from services.errors import OrderIdExhaustedError, OrderNotFoundError

logger = logging.getLogger(__name__)

ORDER_ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
ORDER_ID_LENGTH = 5
DEFAULT_MAX_RETRIES = 100

_system_rng = random.SystemRandom()


def generate_order_id(rng=None) -> str:
    """
    5 characters drawn independently and uniformly from A-Z0-9.
    """
    rng = rng or _system_rng
    return "".join(rng.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_LENGTH))


class OrderService:
    """
    OrderService
    -----------------------
    - OrderRepository wrapper
    - Generates collision-checked order ids
    - register -> order_id, lookup -> Order
    """

    def __init__(self, order_repo: OrderRepository, max_retries: int | None = None, rng=None):
        if max_retries is None:
            max_retries = int(os.getenv("ORDER_ID_MAX_RETRIES", str(DEFAULT_MAX_RETRIES)))
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")

        self.order_repo = order_repo
        self.max_retries = max_retries
        self.rng = rng

    # ---------------------------------------------------------
    # Registration
    # ---------------------------------------------------------
    def register(self, name: str, email: str, max_order: str, time_limit: str) -> str:
        """
        Store a new order under a freshly generated id and return the id.
        A colliding id is drawn again; an existing order is never overwritten.
        """
        for attempt in range(1, self.max_retries + 1):
            order_id = generate_order_id(self.rng)
            order = Order(
                order_id=order_id,
                name=name,
                email=email,
                max=max_order,
                time=time_limit,
            )

            if self.order_repo.insert_if_absent(order):
                logger.info("[OrderService] registered order %s for %s", order_id, name)
                return order_id

            logger.debug("[OrderService] order id collision on %s (attempt %d)", order_id, attempt)

        logger.error("[OrderService] order id space exhausted after %d attempts", self.max_retries)
        raise OrderIdExhaustedError(self.max_retries)

    # ---------------------------------------------------------
    # Lookup
    # ---------------------------------------------------------
    def lookup(self, order_id: str) -> Order:
        order = self.order_repo.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def order_count(self) -> int:
        return self.order_repo.count()
