# api/order_api.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from repositories.order_repository import Order
from services.errors import OrderIdExhaustedError, OrderNotFoundError
from services.order_service import OrderService

logger = logging.getLogger(__name__)


# -----------------------------
# Pydantic Models
# -----------------------------
class CreateOrderIn(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str = ""
    email: str = ""
    max: str = ""
    time: str = ""

    @field_validator("name", "email", "max", "time", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v


async def read_create_order_body(request: Request) -> CreateOrderIn:
    """
    Decode the body as JSON whatever the Content-Type header says
    (browsers posting a plain string send text/plain).
    """
    raw = await request.body()
    try:
        return CreateOrderIn.model_validate_json(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False), body=raw)


# -----------------------------
# Router factory
# -----------------------------
def create_order_router(order_service: OrderService):
    router = APIRouter(prefix="/api")

    # -------------------------------------------------------
    # 1) Register an order
    # -------------------------------------------------------
    @router.post("/createOrder", response_model=Order, response_model_by_alias=True)
    def create_order(body: CreateOrderIn = Depends(read_create_order_body)):
        try:
            order_id = order_service.register(
                name=body.name,
                email=body.email,
                max_order=body.max,
                time_limit=body.time,
            )
        except OrderIdExhaustedError as e:
            logger.error("[OrderAPI] /api/createOrder ERROR: %s", e)
            raise HTTPException(status_code=500, detail=str(e))

        try:
            order = order_service.lookup(order_id)
        except OrderNotFoundError:
            logger.error("[OrderAPI] order %s missing right after insert", order_id)
            raise HTTPException(status_code=404, detail="Order not found")

        logger.info("[OrderAPI] POST /api/createOrder -> %s", order.model_dump(by_alias=True))
        return order

    # -------------------------------------------------------
    # 2) Look up an order
    # -------------------------------------------------------
    @router.get("/orders/{order_id}", response_model=Order, response_model_by_alias=True)
    def get_order(order_id: str):
        try:
            return order_service.lookup(order_id)
        except OrderNotFoundError:
            raise HTTPException(status_code=404, detail="Order not found")

    return router
