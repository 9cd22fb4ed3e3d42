import os
from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_FRONTEND_URL = "http://localhost:3000"
DEFAULT_LOCAL_ORIGINS: Tuple[str, ...] = ("http://localhost:3000", "http://127.0.0.1:3000")
DEFAULT_MAX_REQUEST_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class ApiConfig:
    mode: str = "prod"  # "prod" | "dev"
    host: str = "127.0.0.1"
    port: int = 3001
    frontend_url: str = DEFAULT_FRONTEND_URL
    extra_cors_origins: Tuple[str, ...] = field(default_factory=tuple)
    max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES
    service_name: str = "Web3 Message Signer Backend"
    log_requests: bool = True
    log_request_headers: bool = False

    @property
    def is_prod(self) -> bool:
        return self.mode == "prod"


def _is_truthy(v: str | None) -> bool:
    if v is None:
        return False
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def _split_origins(raw: str | None) -> Tuple[str, ...]:
    return tuple(o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip())


def load_api_config() -> ApiConfig:
    mode = (os.getenv("SIGCHECK_MODE") or "prod").strip().lower()
    frontend = (os.getenv("SIGCHECK_FRONTEND_URL") or os.getenv("FRONTEND_URL") or DEFAULT_FRONTEND_URL).strip()
    return ApiConfig(
        mode=mode,
        host=(os.getenv("SIGCHECK_API_HOST") or "127.0.0.1").strip(),
        port=_env_int("SIGCHECK_API_PORT", 3001),
        frontend_url=frontend.rstrip("/"),
        extra_cors_origins=_split_origins(os.getenv("SIGCHECK_CORS_ORIGINS")),
        max_request_bytes=_env_int("SIGCHECK_MAX_REQUEST_BYTES", DEFAULT_MAX_REQUEST_BYTES),
        service_name=(os.getenv("SIGCHECK_SERVICE_NAME") or "Web3 Message Signer Backend").strip(),
        log_requests=_is_truthy(os.getenv("SIGCHECK_LOG_REQUESTS", "1")),
        log_request_headers=_is_truthy(os.getenv("SIGCHECK_LOG_REQUEST_HEADERS")),
    )


def cors_origins(cfg: ApiConfig) -> List[str]:
    """Allowed CORS origins: local frontends, the configured frontend, then extras.

    Policy:
      - Duplicates are dropped, order is kept
      - Wildcard "*" is rejected in prod mode
      - In dev mode, "*" collapses the list to ["*"]
    """
    out: List[str] = []
    for o in (*DEFAULT_LOCAL_ORIGINS, cfg.frontend_url, *cfg.extra_cors_origins):
        if o and o not in out:
            out.append(o)

    if "*" in out:
        if cfg.is_prod:
            raise RuntimeError(
                "Unsafe CORS configuration: wildcard '*' not allowed in production. "
                "Set explicit origins in SIGCHECK_CORS_ORIGINS."
            )
        return ["*"]

    return out
