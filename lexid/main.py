import logging
from typing import Optional

from fastapi import FastAPI, Header, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .alphabets import ALPHABETS
from .config import VERSION
from .errors import (
    InsertionImpossibleError,
    InvalidSymbolError,
    OrderingError,
    RangeExhaustedError,
)
from .models import ItemCreate, ItemMove, ItemOut, Item, ListCreate, ListOut, OrderedList
from .schemas import (
    BetweenIn,
    ErrorEnvelope,
    GeneratorConfig,
    Health,
    KeyOut,
    NextIn,
    PrevIn,
    Version,
)
from .storage import PlacementError, storage
from .utils import etag_from, matches_etag, new_uuid

logger = logging.getLogger("lexid.api")

app = FastAPI(title="Lexid API", version=VERSION)


# === Helpers ===


def list_out(lst: OrderedList) -> ListOut:
    return ListOut(
        id=lst.id,
        name=lst.name,
        createdAt=lst.created_at,
        updatedAt=lst.updated_at,
        version=lst.version,
        itemsCount=len(lst.items),
    )


def item_out(item: Item) -> ItemOut:
    return ItemOut(
        id=item.id,
        listId=item.list_id,
        title=item.title,
        sortKey=item.sort_key,
        createdAt=item.created_at,
        updatedAt=item.updated_at,
        version=item.version,
    )


def get_list_or_404(list_id: str) -> OrderedList:
    try:
        return storage.get_list(list_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="not_found") from None


def get_item_or_404(lst: OrderedList, item_id: str) -> Item:
    item = lst.items.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="not_found")
    return item


def error_response(status_code: int, code: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    body = ErrorEnvelope(code=code, message=message, details=details or {}, requestId=new_uuid())
    return JSONResponse(status_code=status_code, content={"error": body.model_dump()})


# === Error handlers ===


@app.exception_handler(StarletteHTTPException)
def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Router errors carry phrases like "Not Found"; ours are already codes
    code = str(exc.detail).strip().lower().replace(" ", "_")
    return error_response(exc.status_code, code, str(exc.detail))


@app.exception_handler(RequestValidationError)
def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        422,
        "validation_error",
        "request validation failed",
        {"errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(OrderingError)
def ordering_error(request: Request, exc: OrderingError) -> JSONResponse:
    return error_response(409, "invalid_order", str(exc), {"prev": exc.prev, "before": exc.before})


@app.exception_handler(InsertionImpossibleError)
def insertion_error(request: Request, exc: InsertionImpossibleError) -> JSONResponse:
    return error_response(
        500,
        "insertion_impossible",
        str(exc),
        {"prev": exc.prev, "before": exc.before, "candidate": exc.candidate},
    )


@app.exception_handler(InvalidSymbolError)
def invalid_symbol(request: Request, exc: InvalidSymbolError) -> JSONResponse:
    return error_response(422, "invalid_symbol", str(exc), {"key": exc.key, "symbol": exc.symbol})


@app.exception_handler(RangeExhaustedError)
def range_exhausted(request: Request, exc: RangeExhaustedError) -> JSONResponse:
    return error_response(409, "range_exhausted", str(exc), {"key": exc.key})


@app.exception_handler(PlacementError)
def invalid_move(request: Request, exc: PlacementError) -> JSONResponse:
    return error_response(409, "invalid_move", str(exc))


# === Health & metadata ===


@app.get("/v1/health", response_model=Health)
def health() -> dict:
    return {"status": "ok"}


@app.get("/v1/version", response_model=Version)
def version() -> dict:
    return {"version": VERSION}


@app.get("/v1/alphabets")
def alphabets() -> dict:
    return {"alphabets": ALPHABETS}


@app.get("/v1/config", response_model=GeneratorConfig)
def config() -> GeneratorConfig:
    keys = storage.keys
    return GeneratorConfig(
        symbols="".join(keys.symbols),
        blockSize=keys.block_size,
        stepSize=keys.step_size,
        strict=keys.strict,
        spacingRatio=keys.spacing_ratio,
    )


# === Key endpoints ===


@app.get("/v1/keys/first", response_model=KeyOut)
def first_key():
    return KeyOut(key=storage.keys.next(""))


@app.get("/v1/keys/middle", response_model=KeyOut)
def middle_key():
    return KeyOut(key=storage.keys.middle())


@app.post("/v1/keys:next", response_model=KeyOut)
def next_key(payload: NextIn):
    return KeyOut(key=storage.keys.next(payload.prev))


@app.post("/v1/keys:prev", response_model=KeyOut)
def prev_key(payload: PrevIn):
    return KeyOut(key=storage.keys.checked_prev(payload.next))


@app.post("/v1/keys:between", response_model=KeyOut)
def key_between(payload: BetweenIn):
    return KeyOut(key=storage.keys.next_before(payload.prev, payload.before))


# === List endpoints ===


@app.post("/v1/lists", response_model=ListOut, status_code=201)
def create_list(payload: ListCreate):
    return list_out(storage.create_list(payload.name))


@app.get("/v1/lists/{list_id}", response_model=dict)
def get_list(list_id: str, response: Response):
    lst = get_list_or_404(list_id)
    response.headers["ETag"] = etag_from(lst.version)
    return {
        "list": list_out(lst),
        "items": [item_out(i) for i in lst.ordered_items()],
    }


@app.delete("/v1/lists/{list_id}", status_code=204)
def delete_list(list_id: str, if_match: str = Header(..., alias="If-Match")):
    lst = get_list_or_404(list_id)
    if not matches_etag(if_match, lst.version):
        raise HTTPException(status_code=412, detail="precondition_failed")
    storage.delete_list(list_id)
    return Response(status_code=204)


# === Item endpoints ===


@app.post("/v1/lists/{list_id}/items", response_model=ItemOut, status_code=201)
def create_item(list_id: str, payload: ItemCreate):
    lst = get_list_or_404(list_id)
    item = storage.create_item(lst, payload.title, payload.afterItemId, payload.beforeItemId)
    logger.info("created item %s at %r in list %s", item.id, item.sort_key, lst.id)
    return item_out(item)


@app.post("/v1/lists/{list_id}/items/{item_id}:move", response_model=ItemOut)
def move_item(list_id: str, item_id: str, payload: ItemMove):
    lst = get_list_or_404(list_id)
    item = get_item_or_404(lst, item_id)
    if payload.expectedVersion is not None and payload.expectedVersion != item.version:
        raise HTTPException(status_code=412, detail="precondition_failed")
    item = storage.move_item(lst, item, payload.afterItemId, payload.beforeItemId)
    return item_out(item)


@app.delete("/v1/lists/{list_id}/items/{item_id}", status_code=204)
def delete_item(list_id: str, item_id: str, if_match: str = Header(..., alias="If-Match")):
    lst = get_list_or_404(list_id)
    item = get_item_or_404(lst, item_id)
    if not matches_etag(if_match, item.version):
        raise HTTPException(status_code=412, detail="precondition_failed")
    storage.delete_item(lst, item_id)
    return Response(status_code=204)
