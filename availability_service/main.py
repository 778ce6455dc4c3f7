import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request, Depends
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from availability_service import __version__, config, ids
from availability_service.availability import evaluate, is_weekend
from availability_service.exceptions import StockSourceUnavailable
from availability_service.models import AvailabilityRequest, AvailabilityResponse, ErrorResponse, ErrorDetail
from availability_service.store import StockSource, build_stock_source

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("availability_service")

CHECK_PATH = "/api/check-availability"
METHOD_NOT_ALLOWED = "Method not allowed. Use POST"


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        stock_source = build_stock_source()
        await stock_source.load()
    except Exception as e:
        logger.error(f"Failed to load inventory from {config.STOCK_SOURCE} source: {e}")
        raise

    app.state.stock_source = stock_source
    now = datetime.now()
    logger.info(f"Stock source: {config.STOCK_SOURCE} ({type(stock_source).__name__})")
    logger.info(f"Current day: {now.strftime('%A')} (Weekend: {is_weekend(now)})")
    yield


app = FastAPI(
    title="Product Availability API",
    description=(
        "Check product availability across warehouses. "
        "Applies a 10% reserve buffer and a weekend 2x quantity rule."
    ),
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-Id")
    if not correlation_id:
        correlation_id = ids.generate_correlation_id()

    # Store in request state
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-Id"] = correlation_id
    return response


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405 and request.url.path == CHECK_PATH:
        return PlainTextResponse(METHOD_NOT_ALLOWED, status_code=405, headers=exc.headers)
    return await http_exception_handler(request, exc)


def parse_availability_request(body: bytes) -> AvailabilityRequest:
    """
    Decode the body as JSON regardless of Content-Type.

    A JSON null decodes to an empty request so the field checks report it.
    Raises ValueError (json or pydantic) on anything else that does not fit.
    """
    payload = json.loads(body)
    if payload is None:
        payload = {}
    return AvailabilityRequest.model_validate(payload)


def describe_errors(exc: ValueError) -> str:
    if not isinstance(exc, ValidationError):
        return str(exc)
    return "; ".join(
        f"{'.'.join(str(part) for part in ('body',) + tuple(err['loc']))}: {err['msg']}"
        for err in exc.errors()
    )


def get_stock_source(request: Request) -> StockSource:
    return request.app.state.stock_source


def get_weekend_flag() -> bool:
    """Resolved once per request from the wall clock."""
    return is_weekend()


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs", status_code=301)


@app.get("/health")
def health():
    return {"status": "ok", "service": "availability"}


@app.post(
    CHECK_PATH,
    response_model=AvailabilityResponse,
    tags=["Availability"],
    summary="Check product availability",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": AvailabilityRequest.model_json_schema()}},
        },
    },
    responses={
        400: {
            "description": "Invalid JSON or a missing or invalid field",
            "content": {"text/plain": {"example": "quantity must be greater than 0"}},
        },
        405: {
            "description": "Any method other than POST",
            "content": {"text/plain": {"example": METHOD_NOT_ALLOWED}},
        },
        503: {"model": ErrorResponse, "description": "The stock source is unavailable"},
    },
)
async def check_availability(
    request: Request,
    stock_source: StockSource = Depends(get_stock_source),
    weekend: bool = Depends(get_weekend_flag),
):
    correlation_id = request.state.correlation_id

    try:
        availability_req = parse_availability_request(await request.body())
    except ValueError as e:
        return PlainTextResponse(f"Invalid JSON: {describe_errors(e)}", status_code=400)

    if availability_req.product_id == "":
        return PlainTextResponse("product_id is required", status_code=400)
    if availability_req.quantity <= 0:
        return PlainTextResponse("quantity must be greater than 0", status_code=400)
    if availability_req.warehouse_location == "":
        return PlainTextResponse("warehouse_location is required", status_code=400)

    logger.info(
        f"Availability check for {availability_req.product_id} x {availability_req.quantity} "
        f"at {availability_req.warehouse_location}, weekend {weekend}, correlation {correlation_id}"
    )

    try:
        stock_level = await stock_source.lookup(availability_req.product_id, availability_req.warehouse_location)
    except StockSourceUnavailable as e:
        logger.error(f"Stock source unavailable for {availability_req.product_id}: {e}")
        details = {"status": e.status_code} if e.status_code is not None else {"error": str(e)}
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="STOCK_SOURCE_UNAVAILABLE",
                    message="Stock source is unavailable",
                    details=details,
                    correlation_id=correlation_id
                )
            ).model_dump()
        )

    verdict = evaluate(availability_req, stock_level, weekend)

    if verdict.available:
        logger.info(f"Available: {availability_req.product_id} at {verdict.warehouse}. {verdict.reason}")
    else:
        logger.warning(f"Not available: {availability_req.product_id} at {verdict.warehouse}. {verdict.reason}")
    return verdict
