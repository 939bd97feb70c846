"""FastAPI application for vietqr."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from .config import settings
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .monitoring import metrics_payload, record_service_error
from .schemas import GenerateQRRequest, GenerateQRResponse, VerifyRequest, VerifyResponse
from .services.errors import ServiceError
from .services.generator import VietQRGenerator
from .services.verify import PayloadVerifier

app = FastAPI(title="vietqr", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)

logger = logging.getLogger("vietqr.api")


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        level = logging.ERROR if settings.environment == "production" else logging.WARNING
        logger.log(
            level,
            "api key uses the default value",
            extra={"config_key": "api_key", "environment": settings.environment},
        )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def get_generator() -> VietQRGenerator:
    return VietQRGenerator()


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    path = route_path(request)
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": path, "method": request.method},
    )
    record_service_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled exception",
        extra={"path": route_path(request), "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/qr", response_model=GenerateQRResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
def generate_qr(
    payload: GenerateQRRequest,
    generator: VietQRGenerator = Depends(get_generator),
) -> GenerateQRResponse:
    result = generator.create(payload.to_options())
    return GenerateQRResponse(
        payload=result.payload,
        crc=result.crc,
        point_of_initiation=result.encoded.point_of_initiation,
        qr_png_base64=result.qr_png_base64,
    )


@app.post(
    "/v1/qr/image",
    tags=["qr"],
    dependencies=[Depends(require_api_key)],
    responses={200: {"content": {"image/png": {}}}},
)
def generate_qr_image(
    payload: GenerateQRRequest,
    generator: VietQRGenerator = Depends(get_generator),
) -> Response:
    result = generator.create(payload.to_options())
    return Response(content=result.qr_png_bytes, media_type="image/png", headers={"X-VietQR-CRC": result.crc})


@app.post("/v1/qr/verify", response_model=VerifyResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
async def verify_qr(payload: VerifyRequest) -> VerifyResponse:
    result = PayloadVerifier().verify(payload.payload)
    decoded = result.decoded
    return VerifyResponse(
        crc=decoded.crc,
        crc_valid=decoded.crc_valid,
        point_of_initiation=decoded.point_of_initiation,
        bank_bin=decoded.bank_bin,
        account_number=decoded.account_number,
        service_code=decoded.service_code,
        currency=decoded.currency,
        amount=decoded.amount,
        country_code=decoded.country_code,
        merchant_name=decoded.merchant_name,
        purpose=decoded.purpose,
    )
