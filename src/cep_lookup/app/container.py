from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from cep_lookup.app.settings import Settings, get_settings
from cep_lookup.infra.form import FormBinding
from cep_lookup.infra.http import HttpClient
from cep_lookup.infra.providers.brasilapi import BrasilApiProvider
from cep_lookup.infra.scheduler import NoopScheduler, Scheduler, TimerScheduler
from cep_lookup.services.cep_service import CepService


@dataclass(frozen=True)
class Container:
    settings: Settings
    http: HttpClient
    brasilapi: BrasilApiProvider
    scheduler: Scheduler
    cep_service: CepService
    # formulários montados por chamada de tool: ninguém observa o auto-hide
    form_tool_service: CepService


def build_container(
    settings: Settings | None = None,
    *,
    http: HttpClient | None = None,
    form: FormBinding | None = None,
    scheduler: Scheduler | None = None,
) -> Container:
    settings = settings or get_settings()

    if http is None:
        http = HttpClient(timeout_seconds=settings.http_timeout_seconds, user_agent=settings.http_user_agent)
    scheduler = scheduler or TimerScheduler()

    brasilapi = BrasilApiProvider(http=http, base_url=settings.cep_api_base_url)

    def _service(form: FormBinding | None, scheduler: Scheduler) -> CepService:
        return CepService(
            provider=brasilapi,
            form=form,
            scheduler=scheduler,
            error_element_id=settings.cep_error_element_id,
            cep_field_id=settings.cep_field_id,
            error_display_seconds=settings.cep_error_display_seconds,
            response_keys=settings.cep_response_keys,
        )

    return Container(
        settings=settings,
        http=http,
        brasilapi=brasilapi,
        scheduler=scheduler,
        cep_service=_service(form, scheduler),
        form_tool_service=_service(None, NoopScheduler()),
    )


@lru_cache(maxsize=1)
def get_default_service() -> CepService:
    """
    Instância padrão, criada na primeira chamada a partir do ambiente (.env).
    Quem precisa de outra configuração usa build_container() ou CepService diretamente.
    """
    return build_container().cep_service
