from __future__ import annotations

import logging
from typing import Any

import httpx

from cep_lookup.core.errors import NotFoundError, ServiceError, TransportError

log = logging.getLogger(__name__)


class HttpClient:
    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"headers": {"User-Agent": user_agent}}
        # sem timeout configurado fica o padrão do httpx
        if timeout_seconds is not None:
            kwargs["timeout"] = timeout_seconds
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.Client(**kwargs)

    def get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        """
        Faz um GET e devolve o corpo JSON decodificado.

        Raises:
            NotFoundError: status 404
            ServiceError: outro status fora de 2xx, ou corpo que não é JSON
            TransportError: falha de rede (sem resposta)
        """
        try:
            r = self._client.get(url, params=params)
        except httpx.RequestError as e:
            log.warning("HTTP transport error: %s", e)
            raise TransportError(f"Falha de conexão: {e}") from e

        if r.status_code == 404:
            log.warning("HTTP 404: %s", url)
            raise NotFoundError("CEP não encontrado")
        if not r.is_success:
            log.warning("HTTP %s: %s", r.status_code, url)
            raise ServiceError(f"Erro na API: {r.status_code}", status_code=r.status_code)

        try:
            return r.json()
        except ValueError as e:
            log.warning("Invalid JSON body from %s: %s", url, e)
            raise ServiceError("Resposta inválida da API", status_code=r.status_code) from e

    def close(self) -> None:
        self._client.close()
