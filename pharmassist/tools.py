"""
Assistant tools exposed to the chat model.

Each tool validates its argument object with Pydantic, calls one service and
returns plain text. Errors propagate to the caller (the API layer turns them
into error responses).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, Field, model_validator

from pharmassist.error_handler import NotFoundError
from pharmassist.integrations.contracts.pharmacy import AdminNotification, Priority, PurchaseLog
from pharmassist.integrations.policy import (
    AlternativesService,
    NotifyAdminService,
    PurchaseLogService,
    StockService,
)
from pharmassist.rag.query import RetrievalService, RetrievedRecord

logger = logging.getLogger(__name__)


class UnknownToolError(LookupError):
    pass


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------

class SearchMedsParams(BaseModel):
    name: str = Field(min_length=1, description="The name, symptom or condition to search for.")
    id: Optional[str] = Field(default=None, description="The ID of a specific medicine to fetch.")


class CheckStockParams(BaseModel):
    medicine_id: str = Field(min_length=1, description="The ID of the medicine to check stock for.")


class LogPurchaseParams(BaseModel):
    medicine_name: str = Field(description="The name of the medicine purchased.")
    medicine_id: str = Field(description="The ID of the medicine purchased.")
    customer_id: str = Field(description="The ID of the customer who made the purchase.")
    purchase_date: str = Field(description="The date of purchase in ISO format.")
    quantity: int = Field(gt=0, description="The quantity of medicine purchased.")
    total_price: float = Field(gt=0, description="The total price of the purchase.")


class NotifyAdminParams(BaseModel):
    medicine_name: str = Field(description="The name of the medicine concerned.")
    medicine_id: str = Field(description="The ID of the medicine concerned.")
    reason: str = Field(min_length=1, description="The reason for notification, e.g. out of stock, low inventory.")
    priority: Priority = Field(default=Priority.MEDIUM, description="The priority: high, medium or low.")


class FindAlternativesParams(BaseModel):
    medicine_name: str = Field(min_length=1, description="The medicine to find alternatives for.")
    medicine_id: Optional[str] = Field(default=None, description="The ID of that medicine, if known.")
    limit: int = Field(default=5, ge=1, le=20)


class GetMedicineDetailsParams(BaseModel):
    medicine_id: Optional[str] = Field(default=None, description="The ID of the medicine.")
    medicine_name: Optional[str] = Field(default=None, description="The name of the medicine.")

    @model_validator(mode="after")
    def _require_id_or_name(self) -> "GetMedicineDetailsParams":
        if not self.medicine_id and not self.medicine_name:
            raise ValueError("medicine_id or medicine_name is required")
        return self


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass
class ToolContext:
    retrieval: RetrievalService
    purchase_logs: PurchaseLogService = field(default_factory=PurchaseLogService)
    notify_admin: NotifyAdminService = field(default_factory=NotifyAdminService)
    low_stock_threshold: int = 10

    def __post_init__(self) -> None:
        self.stock = StockService(self.retrieval, low_stock_threshold=self.low_stock_threshold)
        self.alternatives = AlternativesService(self.retrieval)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params_model: Type[BaseModel]
    handler: Callable[[ToolContext, Any], str]

    def schema(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.params_model.model_json_schema(),
        }


def _describe(med: RetrievedRecord) -> str:
    lines = [
        f"Name: {med.product_name}",
        f"ID: {med.id}",
        f"Price: ₦{med.price:g}",
        f"Available: {med.quantity} units",
        f"Category: {med.category_name}",
    ]
    if med.barcode:
        lines.append(f"Barcode: {med.barcode}")
    lines.append(f"Match Score: {med.score * 100:.1f}%")
    return "\n".join(lines)


def _search_meds(ctx: ToolContext, args: SearchMedsParams) -> str:
    if args.id:
        med = ctx.retrieval.get_by_id(args.id)
        if med is None:
            return f"Medicine with ID {args.id} not found."
        return "Found medicine:\n" + _describe(med)

    result = ctx.retrieval.search(args.name, 5)
    if not result.medicines:
        return f'No medicines found for "{args.name}".'
    blocks = [f"{i}. " + _describe(m).replace("\n", "\n   ") for i, m in enumerate(result.medicines, start=1)]
    return (
        f'Found {result.total_results} medicine(s) for "{args.name}":\n\n'
        + "\n".join(blocks)
        + f"\n\nSearch completed in {result.execution_time_ms:.0f}ms"
    )


def _check_stock(ctx: ToolContext, args: CheckStockParams) -> str:
    check = ctx.stock.check(args.medicine_id)
    if not check.found:
        return f"Medicine with ID {args.medicine_id} not found. Check ID: {check.reference}"
    if not check.in_stock:
        status = "OUT OF STOCK"
    elif check.low_stock:
        status = "LOW STOCK"
    else:
        status = "IN STOCK"
    return f"{check.product_name}: {status} ({check.quantity} units).\nCheck ID: {check.reference}"


def _log_purchase(ctx: ToolContext, args: LogPurchaseParams) -> str:
    reference = ctx.purchase_logs.add_log(
        PurchaseLog(
            name=args.medicine_name,
            medicine_id=args.medicine_id,
            customer_id=args.customer_id,
            purchase_date=args.purchase_date,
            quantity=args.quantity,
            total_price=args.total_price,
        )
    )
    return f"Purchase logged for {args.medicine_name} (customer {args.customer_id}).\nLog ID: {reference}"


def _notify_admin(ctx: ToolContext, args: NotifyAdminParams) -> str:
    reference = ctx.notify_admin.notify(
        AdminNotification(
            name=args.medicine_name,
            medicine_id=args.medicine_id,
            reason=args.reason,
            priority=args.priority,
        )
    )
    return f"Admin notified: {args.reason} for {args.medicine_name} (priority {args.priority.value}).\nNotification ID: {reference}"


def _find_alternatives(ctx: ToolContext, args: FindAlternativesParams) -> str:
    alternatives = ctx.alternatives.find(args.medicine_name, args.medicine_id, limit=args.limit)
    if not alternatives:
        return f'No in-stock alternatives found for "{args.medicine_name}".'
    lines = [
        f"{i}. {m.product_name} (ID {m.id}) - ₦{m.price:g}, {m.quantity} units"
        for i, m in enumerate(alternatives, start=1)
    ]
    return f'Alternatives for "{args.medicine_name}":\n' + "\n".join(lines)


def _get_medicine_details(ctx: ToolContext, args: GetMedicineDetailsParams) -> str:
    med = ctx.retrieval.get_by_id(args.medicine_id) if args.medicine_id else None
    if med is None and args.medicine_name:
        result = ctx.retrieval.by_name(args.medicine_name, 1)
        med = result.medicines[0] if result.medicines else None
    if med is None:
        raise NotFoundError(f"No medicine found for id={args.medicine_id!r} name={args.medicine_name!r}")
    return (
        _describe(med)
        + f"\nCategory slug: {med.category_slug}"
        + f"\nPrice updated: {med.price_updated_at}"
        + f"\nIngested: {med.ingested_at}"
    )


TOOLS: Dict[str, ToolSpec] = {
    tool.name: tool
    for tool in [
        ToolSpec("SEARCH_MEDS", "Search for medicines based on a name, symptoms or conditions.", SearchMedsParams, _search_meds),
        ToolSpec("CHECK_STOCK", "Check the stock availability of a specific medicine.", CheckStockParams, _check_stock),
        ToolSpec("LOG_PURCHASE", "Log a medicine purchase made by a customer.", LogPurchaseParams, _log_purchase),
        ToolSpec("NOTIFY_ADMIN", "Notify admin when medicine is out of stock or low.", NotifyAdminParams, _notify_admin),
        ToolSpec("FIND_ALTERNATIVES", "Find in-stock alternative medicines for a given medicine.", FindAlternativesParams, _find_alternatives),
        ToolSpec("GET_MEDICINE_DETAILS", "Get detailed information about a specific medicine.", GetMedicineDetailsParams, _get_medicine_details),
    ]
}


def list_tools() -> List[Dict[str, Any]]:
    return [tool.schema() for tool in TOOLS.values()]


def execute_tool(ctx: ToolContext, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    """Validate ``arguments`` for tool ``name`` and run it. Raises pydantic.ValidationError on bad input."""
    tool = TOOLS.get(name.upper())
    if tool is None:
        raise UnknownToolError(f"Unknown tool: {name}")
    args = tool.params_model.model_validate(arguments or {})
    logger.info("[%s] Called with: %s", tool.name, args.model_dump_json())
    try:
        return tool.handler(ctx, args)
    except Exception as e:
        logger.error("[%s] Error: %s", tool.name, e)
        raise
