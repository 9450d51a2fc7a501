from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftpay.errors import CallerMisuse, ShiftpayError

from app.api.routes import health
from app.core.config import settings
from app.core.logging import bind_request_context, configure_logging, get_logger
from app.core.monitoring import configure_error_monitoring, report_exception
from app.core.observability import configure_observability
from app.domains.attendance.router import router as attendance_router
from app.domains.employees.router import router as employee_router
from app.domains.payroll.router import router as payroll_router
from app.domains.rates.router import router as rates_router
from app.domains.timesheets.router import router as timesheets_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.cors_origins] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    bind_request_context(request.method, request.url.path)
    return await call_next(request)


app.include_router(health.router)
app.include_router(employee_router)
app.include_router(attendance_router)
app.include_router(rates_router)
app.include_router(payroll_router)
app.include_router(timesheets_router)


@app.exception_handler(ShiftpayError)
def shiftpay_error_handler(request: Request, exc: ShiftpayError) -> JSONResponse:
    logger.warning("shiftpay_error", path=request.url.path, error=type(exc).__name__, detail=str(exc))
    if isinstance(exc, CallerMisuse):
        report_exception(exc, path=request.url.path)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Shiftpay API running", "environment": settings.env}
