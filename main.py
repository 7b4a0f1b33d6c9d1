import json
import logging
import time
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from database import RegistrationStore, build_store
from errors import InternalError, InvalidJson, InvalidRecord, RegistrationError, RouteNotFound
from ids import generate_registration_id, utc_now_iso
from logging_config import configure_logging
from pricing import price
from schemas import Registration
from validation import coerce_quantity, validate

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "OPTIONS,POST,GET,DELETE",
    "Content-Type": "application/json",
}

router = APIRouter()


def json_response(status_code: int, content) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


# Dependencies
def get_store(request: Request) -> RegistrationStore:
    return request.app.state.store


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


# Helpers
def _aws_event(request: Request) -> dict:
    # Set by Mangum when running inside Lambda.
    return request.scope.get("aws.event") or {}


def resolve_request_id(request: Request) -> str:
    request_id = (_aws_event(request).get("requestContext") or {}).get("requestId")
    return request_id or request.headers.get("x-request-id") or uuid.uuid4().hex


def resolve_source_ip(request: Request) -> Optional[str]:
    context = _aws_event(request).get("requestContext") or {}
    source_ip = (context.get("identity") or {}).get("sourceIp") or (context.get("http") or {}).get("sourceIp")
    if source_ip:
        return source_ip
    return request.client.host if request.client else None


def parse_body(raw: bytes, request_id: str) -> dict:
    try:
        body = json.loads(raw)
    except ValueError as e:
        logger.error(
            "Invalid JSON in request body",
            exc_info=e,
            extra={"requestId": request_id, "bodyLength": len(raw)},
        )
        raise InvalidJson() from e
    if not isinstance(body, dict):
        logger.warning(
            "Request body is not a JSON object",
            extra={"requestId": request_id, "bodyType": type(body).__name__},
        )
        raise InvalidJson()
    logger.info(
        "Request body parsed successfully",
        extra={
            "requestId": request_id,
            "hasFirstName": bool(body.get("firstName")),
            "hasEmail": bool(body.get("email")),
            "ticketType": body.get("ticketType"),
            "quantity": body.get("quantity"),
        },
    )
    return body


def build_registration(body: dict) -> Registration:
    """Turn a validated body into a record. Id, total, status and timestamps
    are always computed here, whatever the caller sent."""
    quantity = coerce_quantity(body["quantity"])
    quote = price(body["ticketType"], quantity)
    now = utc_now_iso()
    newsletter = body.get("newsletter")
    return Registration(
        registration_id=generate_registration_id(),
        first_name=body["firstName"],
        last_name=body["lastName"],
        email=body["email"],
        phone=body.get("phone") or None,
        ticket_type=body["ticketType"],
        quantity=quantity,
        newsletter=False if newsletter is None else newsletter,
        total_amount=quote.total,
        created_at=now,
        updated_at=now,
    )


# Endpoints
@router.post("/register")
async def create_registration(
    request: Request,
    store: RegistrationStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    try:
        body = parse_body(await request.body(), request_id)

        error = validate(body)
        if error is not None:
            logger.warning(
                "Validation failed",
                extra={
                    "requestId": request_id,
                    "error": error.message,
                    "providedData": {
                        "firstName": "provided" if body.get("firstName") else "missing",
                        "lastName": "provided" if body.get("lastName") else "missing",
                        "email": "provided" if body.get("email") else "missing",
                        "ticketType": body.get("ticketType"),
                        "quantity": body.get("quantity"),
                    },
                },
            )
            raise error

        try:
            registration = build_registration(body)
        except ValidationError as e:
            logger.warning(
                "Registration record rejected",
                extra={"requestId": request_id, "fields": [".".join(map(str, err["loc"])) for err in e.errors()]},
            )
            raise InvalidRecord() from e

        logger.info(
            "Processing registration",
            extra={
                "requestId": request_id,
                "registrationId": registration.registration_id,
                "ticketType": registration.ticket_type,
                "quantity": registration.quantity,
                "totalAmount": registration.total_amount,
            },
        )
        item = registration.to_item()
        await run_in_threadpool(store.put, item)
    except RegistrationError:
        raise
    except Exception as e:
        logger.error(
            "Registration processing failed",
            exc_info=e,
            extra={"requestId": request_id, "errorType": type(e).__name__},
        )
        raise InternalError("Unable to process registration at this time") from e

    logger.info(
        "Registration completed successfully",
        extra={"requestId": request_id, "registrationId": registration.registration_id},
    )
    return json_response(
        201,
        {
            "success": True,
            "message": "Registration successful",
            "registrationId": registration.registration_id,
            "data": item,
        },
    )


@router.get("/registrations")
def list_registrations(
    store: RegistrationStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    try:
        items = store.scan_all()
    except Exception as e:
        logger.error("Listing registrations failed", exc_info=e, extra={"requestId": request_id})
        raise InternalError("Unable to retrieve registrations at this time") from e
    logger.info("Registrations listed", extra={"requestId": request_id, "count": len(items)})
    return json_response(200, {"success": True, "data": items, "count": len(items)})


@router.delete("/registrations/{registration_id}")
def delete_registration(
    registration_id: str,
    store: RegistrationStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    try:
        store.delete_by_id(registration_id)
    except Exception as e:
        logger.error(
            "Deleting registration failed",
            exc_info=e,
            extra={"requestId": request_id, "registrationId": registration_id},
        )
        raise InternalError("Unable to delete registration at this time") from e
    logger.info("Registration deleted", extra={"requestId": request_id, "registrationId": registration_id})
    return json_response(200, {"success": True, "message": "Registration deleted successfully"})


@router.options("/{path:path}")
def preflight(path: str, request_id: str = Depends(get_request_id)):
    logger.info("OPTIONS preflight request handled", extra={"requestId": request_id, "path": f"/{path}"})
    return Response(status_code=200, content=b"", headers=CORS_HEADERS)


# Error handlers and middleware
async def registration_error_handler(request: Request, exc: RegistrationError):
    return json_response(exc.status_code, exc.to_body())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Every path answers OPTIONS, so an unknown method on a known path shows
    # up as 405; both mean there is no such route.
    if exc.status_code in (404, 405):
        logger.warning(
            "Route not found",
            extra={"requestId": get_request_id(request), "httpMethod": request.method, "path": request.url.path},
        )
        return await registration_error_handler(request, RouteNotFound())
    return json_response(exc.status_code, {"error": str(exc.detail)})


async def log_requests(request: Request, call_next):
    request_id = resolve_request_id(request)
    request.state.request_id = request_id
    started = time.perf_counter()
    logger.info(
        "Registration request received",
        extra={
            "requestId": request_id,
            "httpMethod": request.method,
            "path": request.url.path,
            "userAgent": request.headers.get("user-agent"),
            "sourceIp": resolve_source_ip(request),
        },
    )
    response = await call_next(request)
    processing_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        "Request completed",
        extra={
            "requestId": request_id,
            "statusCode": response.status_code,
            "processingTime": f"{processing_ms}ms",
        },
    )
    return response


def create_app(settings: Optional[Settings] = None, store: Optional[RegistrationStore] = None) -> FastAPI:
    """Build the API. The store defaults to the backend named in settings."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Eventica Registration API",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)

    app.add_exception_handler(RegistrationError, registration_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.middleware("http")(log_requests)
    app.include_router(router)

    logger.debug(
        "Application created",
        extra={"stage": settings.STAGE, "storeBackend": type(app.state.store).__name__},
    )
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)
