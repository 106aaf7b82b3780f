"""
Ledger Service parses plain-text outlines into sectioned ledgers with totals,
applies table edits, and renders ledgers back to outline text or export formats.
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

from shared.observability import (
    CORRELATION_ID_HEADER,
    bind_request_context,
    ensure_request_id,
    hash_payload,
    redact_fields,
    reset_request_context,
    setup_telemetry,
)

from .edits import LedgerIndexError, UnknownEditError, apply_edit
from .export import (
    LedgerTreeError,
    build_document_snapshot,
    format_display_value,
    ledger_from_tree,
    ledger_to_rows,
    ledger_to_tree,
    rows_to_csv,
)
from .models.ledger import Ledger
from .parsers.outline_parser import parse_outline
from .serializer import serialize_ledger
from .settings import LedgerSettings, LedgerSettingsError, load_ledger_settings
from .totals import SUBTOTAL_SHARE_LABEL, section_shares

SERVICE_NAME = "ledger-service"
CSV_FILENAME = "parsed-data.csv"
JSON_FILENAME = "parsed-data.json"
LOGGED_EDIT_KEYS = ("op", "section", "item")

app = FastAPI(title="Ledger Service")
setup_telemetry(app, service_name=SERVICE_NAME)
logger = logging.getLogger(__name__)

try:
    LEDGER_SETTINGS = load_ledger_settings()
except LedgerSettingsError as exc:
    logger.error("Failed to load ledger settings: %s", exc)
    raise


def reload_settings_for_tests() -> LedgerSettings:
    """
    Refresh ledger settings after tests mutate environment variables.
    """

    global LEDGER_SETTINGS
    LEDGER_SETTINGS = load_ledger_settings()
    return LEDGER_SETTINGS


class OutlinePayload(BaseModel):
    text: str


class LedgerPayload(BaseModel):
    ledger: Dict[str, Any]


class EditOperationModel(BaseModel):
    op: Literal[
        "rename_section",
        "rename_item",
        "set_item_value",
        "toggle_item_exclusion",
        "add_item",
        "remove_item",
        "add_section",
        "remove_section",
    ]
    section: Optional[int] = None
    item: Optional[int] = None
    name: Optional[str] = None
    # Numbers are accepted as typed; booleans are not values.
    value: Optional[Union[StrictStr, StrictInt, StrictFloat]] = None


class EditsPayload(BaseModel):
    ledger: Dict[str, Any]
    operations: List[EditOperationModel] = Field(default_factory=list)


class SnapshotPayload(BaseModel):
    title: Optional[str] = None
    text: str


def error_response(status_code: int, error_code: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error_code, "details": details},
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = ensure_request_id(request)
    token = bind_request_context(request_id)
    try:
        response = await call_next(request)
        response.headers.setdefault(CORRELATION_ID_HEADER, request_id)
        return response
    finally:
        reset_request_context(token)


@app.get("/health")
def health_check() -> dict:
    """
    Report overall service health; expects no payload.
    Returns a minimal status object for uptime probes and orchestrators.
    """
    return {"status": "ok", "service": SERVICE_NAME}


@app.post("/parse", response_model=None)
def parse_text(payload: OutlinePayload) -> Dict[str, Any] | JSONResponse:
    """
    Parse outline text into the ledger tree (sections, items, totals, grandTotal).
    Never fails on content; only oversized text is rejected.
    """
    ledger_or_error = _parse_within_limits(payload.text, event="parse_outline")
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error
    return ledger_to_tree(ledger_or_error)


@app.post("/serialize", response_model=None)
def serialize_tree(payload: LedgerPayload) -> Dict[str, Any] | JSONResponse:
    """Render a ledger tree back into outline text."""
    ledger_or_error = _load_tree(payload.ledger)
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error
    return {"text": serialize_ledger(ledger_or_error)}


@app.post("/recompute", response_model=None)
def recompute_tree(payload: LedgerPayload) -> Dict[str, Any] | JSONResponse:
    """Return the ledger tree with section totals and grandTotal recomputed from its items."""
    ledger_or_error = _load_tree(payload.ledger)
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error
    return ledger_to_tree(ledger_or_error)


@app.post("/edits", response_model=None)
def apply_edits(payload: EditsPayload) -> Dict[str, Any] | JSONResponse:
    """
    Apply table edits in order to the provided ledger tree.
    Returns the edited tree and its outline text; the batch is rejected as a whole
    when any operation fails.
    """
    ledger_or_error = _load_tree(payload.ledger)
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error

    ledger = ledger_or_error
    for position, operation in enumerate(payload.operations):
        op_fields = operation.model_dump(exclude_none=True)
        try:
            apply_edit(ledger, op_fields)
        except LedgerIndexError as exc:
            logger.warning(
                {
                    "event": "ledger_edit_rejected",
                    "reason": "index_out_of_range",
                    "position": position,
                    "operation": redact_fields(op_fields, LOGGED_EDIT_KEYS),
                }
            )
            return error_response(422, "edit_index_out_of_range", f"Operation {position}: {exc}")
        except UnknownEditError as exc:
            logger.warning(
                {
                    "event": "ledger_edit_rejected",
                    "reason": "invalid_operation",
                    "position": position,
                    "operation": redact_fields(op_fields, LOGGED_EDIT_KEYS),
                }
            )
            return error_response(422, "invalid_edit_operation", f"Operation {position}: {exc}")

    text = serialize_ledger(ledger)
    logger.info(
        {
            "event": "ledger_edits_applied",
            "operation_count": len(payload.operations),
            "section_count": len(ledger.sections),
            "grand_total": ledger.grand_total,
            "text_hash": hash_payload(text),
        }
    )
    return {"ledger": ledger_to_tree(ledger), "text": text}


@app.post("/shares", response_model=None)
def item_shares(payload: OutlinePayload) -> Dict[str, Any] | JSONResponse:
    """
    Report each item's share of its section subtotal ("41.5%", "Excluded" or "—")
    alongside the on-screen rendering of item values, subtotals and the grand total.
    """
    ledger_or_error = _parse_within_limits(payload.text, event="item_shares")
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error
    return {
        "sections": [
            {
                "name": section.name,
                "shares": section_shares(section),
                "values": [format_display_value(item.value, LEDGER_SETTINGS) for item in section.items],
                "subtotal_share": SUBTOTAL_SHARE_LABEL,
                "subtotal": format_display_value(section.total, LEDGER_SETTINGS),
            }
            for section in ledger_or_error.sections
        ],
        "grand_total": format_display_value(ledger_or_error.grand_total, LEDGER_SETTINGS),
    }


@app.post("/export/json", response_model=None)
def export_json(payload: OutlinePayload) -> JSONResponse:
    ledger_or_error = _parse_within_limits(payload.text, event="export_json")
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error
    return JSONResponse(
        content=ledger_to_tree(ledger_or_error),
        headers={"Content-Disposition": f'attachment; filename="{JSON_FILENAME}"'},
    )


@app.post("/export/csv", response_model=None)
def export_csv(payload: OutlinePayload) -> Response:
    """Download the ledger as CSV with values scaled by the display factor and labelled with the currency."""
    ledger_or_error = _parse_within_limits(payload.text, event="export_csv")
    if isinstance(ledger_or_error, JSONResponse):
        return ledger_or_error
    csv_content = rows_to_csv(ledger_to_rows(ledger_or_error, LEDGER_SETTINGS))
    return Response(
        content=csv_content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@app.post("/snapshot", response_model=None)
def document_snapshot(payload: SnapshotPayload) -> Dict[str, Any] | JSONResponse:
    """Build the (title, text, parsed_data) triple a document store persists."""
    if len(payload.text) > LEDGER_SETTINGS.max_text_length:
        return _text_too_large(payload.text, event="document_snapshot")
    snapshot = build_document_snapshot(payload.title, payload.text)
    return {"title": snapshot.title, "text": snapshot.text, "parsed_data": snapshot.parsed_data}


def _parse_within_limits(text: str, event: str) -> Ledger | JSONResponse:
    if len(text) > LEDGER_SETTINGS.max_text_length:
        return _text_too_large(text, event=event)

    ledger = parse_outline(text)
    logger.info(
        {
            "event": event,
            "text_hash": hash_payload(text),
            "text_length": len(text),
            "section_count": len(ledger.sections),
            "item_count": ledger.item_count,
            "grand_total": ledger.grand_total,
        }
    )
    return ledger


def _text_too_large(text: str, event: str) -> JSONResponse:
    logger.warning(
        {
            "event": f"{event}_rejected",
            "reason": "text_too_large",
            "text_length": len(text),
            "max_text_length": LEDGER_SETTINGS.max_text_length,
        }
    )
    return error_response(
        413,
        "text_too_large",
        f"Outline text exceeds {LEDGER_SETTINGS.max_text_length} characters.",
    )


def _load_tree(tree: Dict[str, Any]) -> Ledger | JSONResponse:
    try:
        return ledger_from_tree(tree)
    except LedgerTreeError as exc:
        logger.warning({"event": "ledger_tree_rejected", "error": str(exc), "tree_hash": hash_payload(tree)})
        return error_response(422, "invalid_ledger", str(exc))
