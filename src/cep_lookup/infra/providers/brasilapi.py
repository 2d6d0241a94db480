from __future__ import annotations

import logging

from cep_lookup.core.errors import ServiceError
from cep_lookup.core.models import AddressRecord
from cep_lookup.infra.http import HttpClient

log = logging.getLogger(__name__)

BRASILAPI_CEP_URL = "https://brasilapi.com.br/api/cep/v1"


class BrasilApiProvider:
    """
    BrasilAPI CEP v1 (https://brasilapi.com.br/docs)
    - GET {base_url}/{cep}, cep com 8 dígitos
    - resposta: { cep, state, city, neighborhood, street, service, ... }
    """

    def __init__(self, *, http: HttpClient, base_url: str = BRASILAPI_CEP_URL) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    def fetch(self, cep: str) -> AddressRecord:
        payload = self._http.get_json(f"{self._base_url}/{cep}")
        if not isinstance(payload, dict):
            log.warning("Unexpected BrasilAPI payload type for %s: %s", cep, type(payload).__name__)
            raise ServiceError("Resposta inválida da API", status_code=200)
        return payload
