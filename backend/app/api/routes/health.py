from fastapi import APIRouter

from shiftpay import __version__

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Liveness probe")
def healthcheck() -> dict[str, str]:
    return {"status": "ok", "version": __version__}
