from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from cep_lookup.core.models import DEFAULT_RESPONSE_KEYS
from cep_lookup.infra.providers.brasilapi import BRASILAPI_CEP_URL

load_dotenv()


@dataclass
class Settings:
    # BrasilAPI
    cep_api_base_url: str
    cep_response_keys: dict[str, str]

    # Form / inline error
    cep_error_display_seconds: float
    cep_error_element_id: str
    cep_field_id: str

    # HTTP
    http_timeout_seconds: float | None
    http_user_agent: str

    # Logging
    log_level: str

    # MCP server
    mcp_host: str
    mcp_port: int
    mcp_path: str


def _clean(s: str | None) -> str:
    return (s or "").strip().strip('"').strip("'")


def _int(name: str, default: int) -> int:
    v = _clean(os.getenv(name, str(default)))
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer, got {v!r}") from e


def _float(name: str, default: float) -> float:
    v = _float_opt(name)
    return default if v is None else v


def _float_opt(name: str) -> float | None:
    v = _clean(os.getenv(name))
    if not v:
        return None
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number, got {v!r}") from e


def _response_keys(name: str) -> dict[str, str]:
    """
    CEP_RESPONSE_KEYS="cep=cep,rua=street,bairro=neighborhood,cidade=city,estado=state"
    - chaves omitidas mantêm o padrão da BrasilAPI
    """
    keys = dict(DEFAULT_RESPONSE_KEYS)
    raw = _clean(os.getenv(name))
    if not raw:
        return keys

    for pair in raw.split(","):
        if not pair.strip():
            continue
        logical, sep, remote = pair.partition("=")
        if not sep or not logical.strip() or not remote.strip():
            raise RuntimeError(f"{name} entries must look like 'campo=chave', got {pair!r}")
        keys[logical.strip()] = remote.strip()
    return keys


def get_settings() -> Settings:
    return Settings(
        # BrasilAPI
        cep_api_base_url=_clean(os.getenv("CEP_API_BASE_URL")) or BRASILAPI_CEP_URL,
        cep_response_keys=_response_keys("CEP_RESPONSE_KEYS"),
        # form
        cep_error_display_seconds=_float("CEP_ERROR_DISPLAY_SECONDS", 5.0),
        cep_error_element_id=_clean(os.getenv("CEP_ERROR_ELEMENT_ID")) or "cep-erro",
        cep_field_id=_clean(os.getenv("CEP_FIELD_ID")) or "cep",
        # http
        http_timeout_seconds=_float_opt("HTTP_TIMEOUT_SECONDS"),
        http_user_agent=_clean(os.getenv("HTTP_USER_AGENT", "cep-lookup/0.1.0")),
        # logging
        log_level=_clean(os.getenv("LOG_LEVEL", "INFO")).upper(),
        # mcp
        mcp_host=_clean(os.getenv("MCP_HOST", "127.0.0.1")),
        mcp_port=_int("MCP_PORT", 3334),
        mcp_path=_clean(os.getenv("MCP_PATH", "/mcp")),
    )
