from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict

CUSTOMER_STATUSES = ("Active", "Inactive")
ORDER_STATUSES = ("Completed", "In-Progress", "Pending", "Cancelled")
ORDER_TYPES = ("Home Delivery", "Pick Up", "Express")
PRODUCT_STATUSES = ("Published", "Unpublished", "Draft")
ACTIVE_ORDER_STATUSES = ("In-Progress", "Pending")
LOW_STOCK_THRESHOLD = 10


class Row(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int


class Customer(Row):
    name: str
    email: str
    phone: str | None = None
    orders_count: int = 0
    total_spent: float = 0.0
    customer_since: dt.date | dt.datetime | str | None = None
    status: str = "Active"
    avatar_url: str | None = None
    created_at: dt.datetime | str | None = None


class Order(Row):
    order_number: str
    customer_id: str | None = None
    customer_name: str
    order_date: dt.date | dt.datetime | str | None = None
    order_type: str | None = None
    tracking_id: str | None = None
    order_total: float = 0.0
    status: str = "Pending"
    items_count: int = 0
    created_at: dt.datetime | str | None = None


class Product(Row):
    name: str
    category: str
    unit_price: float = 0.0
    in_stock: int = 0
    discount_percent: float = 0.0
    total_value: float = 0.0
    status: str = "Draft"
    image_url: str | None = None
    created_at: dt.datetime | str | None = None


class AnalyticsDaily(Row):
    date: dt.date | str
    total_sales: float = 0.0
    orders_count: int = 0
    new_customers: int = 0
    page_views: int = 0
    created_at: dt.datetime | str | None = None
