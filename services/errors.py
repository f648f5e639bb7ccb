# services/errors.py


class OrderServiceError(Exception):
    """Base class for order registry failures."""


class OrderIdExhaustedError(OrderServiceError):
    """No free order id was found within the retry budget."""

    def __init__(self, attempts: int):
        super().__init__(f"could not generate a free order id after {attempts} attempts")
        self.attempts = attempts


class OrderNotFoundError(OrderServiceError):
    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id
