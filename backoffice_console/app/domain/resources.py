from __future__ import annotations

from dataclasses import dataclass

from backoffice_console.app.domain.models import (
    CUSTOMER_STATUSES,
    ORDER_STATUSES,
    PRODUCT_STATUSES,
    Customer,
    Order,
    Product,
    Row,
)
from backoffice_console.app.ui.listing_view import ColumnDef, SortDirection


@dataclass(frozen=True)
class ResourceDescriptor:
    """Everything the generic table engine needs to know about one table."""

    name: str
    label: str
    columns: tuple[ColumnDef, ...]
    searchable_fields: tuple[str, ...]
    default_sort: tuple[str, SortDirection]
    row_model: type[Row] = Row
    status_field: str | None = "status"
    status_options: tuple[str, ...] = ()
    extra_filter_fields: tuple[str, ...] = ()
    id_field: str = "id"
    select_columns: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        if self.default_sort[0] not in self.sortable_columns:
            raise ValueError(f"{self.name}: default sort column {self.default_sort[0]!r} is not sortable")

    @property
    def sortable_columns(self) -> frozenset[str]:
        return frozenset(column.key for column in self.columns if column.sortable)

    @property
    def filter_fields(self) -> tuple[str, ...]:
        base = (self.status_field,) if self.status_field else ()
        return base + self.extra_filter_fields

    @property
    def load_error_message(self) -> str:
        return f"Failed to load {self.label}. Please try again."


CUSTOMERS = ResourceDescriptor(
    name="customers",
    label="customers",
    columns=(
        ColumnDef("name", "Customer Name"),
        ColumnDef("email", "Email"),
        ColumnDef("phone", "Phone", sortable=False),
        ColumnDef("orders_count", "Orders", kind="count"),
        ColumnDef("total_spent", "Order Total", kind="currency"),
        ColumnDef("customer_since", "Customer Since", kind="date"),
        ColumnDef("status", "Status", kind="status"),
    ),
    searchable_fields=("name", "email"),
    default_sort=("customer_since", "desc"),
    row_model=Customer,
    status_options=CUSTOMER_STATUSES,
)

ORDERS = ResourceDescriptor(
    name="orders",
    label="orders",
    columns=(
        ColumnDef("customer_name", "Customer Name"),
        ColumnDef("order_date", "Order Date", kind="date"),
        ColumnDef("order_type", "Order Type"),
        ColumnDef("tracking_id", "Tracking ID", sortable=False),
        ColumnDef("order_total", "Order Total", kind="currency"),
        ColumnDef("status", "Status", kind="status"),
    ),
    searchable_fields=("customer_name",),
    default_sort=("order_date", "desc"),
    row_model=Order,
    status_options=ORDER_STATUSES,
)

PRODUCTS = ResourceDescriptor(
    name="products",
    label="products",
    columns=(
        ColumnDef("name", "Product Name"),
        ColumnDef("category", "Category"),
        ColumnDef("unit_price", "Unit Price", kind="currency"),
        ColumnDef("in_stock", "In-Stock", kind="count"),
        ColumnDef("discount_percent", "Discount", kind="percent"),
        ColumnDef("total_value", "Total Value", kind="currency"),
        ColumnDef("status", "Status", kind="status"),
    ),
    searchable_fields=("name", "category"),
    default_sort=("name", "asc"),
    row_model=Product,
    status_options=PRODUCT_STATUSES,
    extra_filter_fields=("category",),
)

RESOURCES: dict[str, ResourceDescriptor] = {item.name: item for item in (CUSTOMERS, ORDERS, PRODUCTS)}
