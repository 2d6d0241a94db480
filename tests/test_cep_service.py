from __future__ import annotations

import logging

import httpx
import pytest

from cep_lookup.core.errors import NotFoundError, ServiceError, TransportError, ValidationError
from cep_lookup.core.models import ResultCallback
from cep_lookup.infra.form import InMemoryForm
from cep_lookup.infra.http import HttpClient
from cep_lookup.infra.providers.brasilapi import BrasilApiProvider
from cep_lookup.services.cep_service import CepService

PAULISTA = {
    "cep": "01310-100",
    "state": "SP",
    "city": "São Paulo",
    "neighborhood": "Bela Vista",
    "street": "Avenida Paulista",
}


class RecordingScheduler:
    def __init__(self):
        self.calls = []

    def call_later(self, delay_seconds, callback):
        self.calls.append((delay_seconds, callback))


def _service(status=200, body=None, *, form=None, scheduler=None, requests=None, **kwargs):
    seen = requests if requests is not None else []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, json=PAULISTA if body is None else body)

    http = HttpClient(user_agent="cep-lookup-tests", transport=httpx.MockTransport(handler))
    return CepService(
        provider=BrasilApiProvider(http=http),
        form=form,
        scheduler=scheduler or RecordingScheduler(),
        **kwargs,
    )


def _address_form():
    return InMemoryForm({"cep": "", "rua": "", "bairro": "", "cidade": "", "estado": ""})


def test_validate_and_format():
    svc = _service()
    assert svc.validate("01310-100")
    assert svc.validate("01310100")
    assert not svc.validate("1234567")
    assert not svc.validate("abcdefgh")
    assert svc.format("01310100") == "01310-100"
    assert svc.format("123") == "123"


def test_lookup_returns_decoded_body():
    requests = []
    svc = _service(requests=requests)

    record = svc.lookup("01310-100")

    assert record == PAULISTA
    assert len(requests) == 1
    assert str(requests[0].url) == "https://brasilapi.com.br/api/cep/v1/01310100"
    assert requests[0].method == "GET"
    assert requests[0].headers["User-Agent"] == "cep-lookup-tests"


def test_lookup_not_found_leaves_form_untouched():
    form = _address_form()
    before = form.values()
    failures = []
    svc = _service(404, {"message": "CEP não encontrado"}, form=form)

    with pytest.raises(NotFoundError):
        svc.lookup("00000000")
    with pytest.raises(NotFoundError):
        svc.lookup_and_apply("00000000", callback=ResultCallback(on_failure=failures.append))

    assert form.values() == before
    assert len(failures) == 1


def test_lookup_service_error_carries_status():
    svc = _service(500, {"message": "boom"})

    with pytest.raises(ServiceError) as exc:
        svc.lookup("01310100")

    assert exc.value.status_code == 500
    assert str(exc.value) == "Erro na API: 500"


def test_lookup_non_object_body_is_service_error():
    svc = _service(200, ["01310100"])

    with pytest.raises(ServiceError):
        svc.lookup("01310100")


def test_lookup_invalid_cep_makes_no_request():
    requests = []
    svc = _service(requests=requests)

    with pytest.raises(ValidationError, match="8 dígitos"):
        svc.lookup("123")

    assert requests == []


def test_lookup_transport_error_wraps_cause():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = HttpClient(user_agent="t", transport=httpx.MockTransport(handler))
    svc = CepService(provider=BrasilApiProvider(http=http), scheduler=RecordingScheduler())

    with pytest.raises(TransportError) as exc:
        svc.lookup("01310100")

    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_lookup_failure_is_logged(caplog):
    svc = _service(500, {})

    with caplog.at_level(logging.ERROR, logger="cep_lookup.services.cep_service"):
        with pytest.raises(ServiceError):
            svc.lookup("01310100")

    assert any("Erro ao buscar CEP" in r.getMessage() for r in caplog.records)


def test_apply_to_form_with_custom_binding():
    form = InMemoryForm({"city-input": ""})
    svc = _service(form=form)

    svc.apply_to_form({"cidade": "São Paulo"}, {"cidade": "city-input"})

    assert form.get_field("city-input").value == "São Paulo"


def test_apply_to_form_skips_missing_elements_and_values():
    form = InMemoryForm({"rua": "antiga"})
    svc = _service(form=form)

    svc.apply_to_form({"cidade": "São Paulo", "rua": ""}, {"cidade": "city-input"})

    assert form.values() == {"rua": "antiga"}


def test_apply_to_form_reads_brasilapi_keys():
    form = _address_form()
    svc = _service(form=form)

    svc.apply_to_form(PAULISTA)

    assert form.values() == {
        "cep": "01310-100",
        "rua": "Avenida Paulista",
        "bairro": "Bela Vista",
        "cidade": "São Paulo",
        "estado": "SP",
    }


def test_apply_to_form_uses_configured_response_keys():
    form = InMemoryForm({"cidade": ""})
    svc = _service(form=form, response_keys={"cidade": "localidade"})

    svc.apply_to_form({"localidade": "Curitiba", "city": "ignored"})

    assert form.get_field("cidade").value == "Curitiba"


def test_lookup_and_apply_success_calls_on_success():
    form = _address_form()
    successes = []
    svc = _service(form=form)

    record = svc.lookup_and_apply("01310100", callback=ResultCallback(on_success=successes.append))

    assert record == PAULISTA
    assert successes == [PAULISTA]
    assert form.get_field("cidade").value == "São Paulo"
    assert form.get_field("cep-erro") is None


def test_lookup_and_apply_failure_with_callback_skips_inline_error():
    form = _address_form()
    failures = []
    svc = _service(404, {}, form=form)

    with pytest.raises(NotFoundError) as exc:
        svc.lookup_and_apply("00000000", callback=ResultCallback(on_failure=failures.append))

    assert failures == [exc.value]
    assert form.get_field("cep-erro") is None


def test_lookup_and_apply_failure_without_callback_shows_inline_error():
    form = _address_form()
    svc = _service(404, {}, form=form)

    with pytest.raises(NotFoundError):
        svc.lookup_and_apply("00000000")

    error = form.get_field("cep-erro")
    assert error is not None
    assert error.text == "CEP não encontrado"
    assert error.visible
    assert error.css_class == "alert alert-danger mt-2"
    assert form.order()[:2] == ["cep", "cep-erro"]


def test_lookup_and_apply_validation_error_shows_inline_error():
    form = _address_form()
    requests = []
    svc = _service(form=form, requests=requests)

    with pytest.raises(ValidationError):
        svc.lookup_and_apply("123")

    assert form.get_field("cep-erro").text == "CEP deve ter 8 dígitos"
    assert requests == []


def test_show_error_reuses_element_and_schedules_hide():
    form = _address_form()
    scheduler = RecordingScheduler()
    svc = _service(form=form, scheduler=scheduler)

    svc.show_error("primeiro")
    svc.show_error("segundo")

    assert form.order().count("cep-erro") == 1
    error = form.get_field("cep-erro")
    assert error.text == "segundo"
    assert [delay for delay, _ in scheduler.calls] == [5.0, 5.0]

    scheduler.calls[0][1]()
    assert not error.visible


def test_show_error_without_cep_field_is_not_attached(caplog):
    form = InMemoryForm({"rua": ""})
    svc = _service(form=form)

    with caplog.at_level(logging.WARNING, logger="cep_lookup.services.cep_service"):
        element = svc.show_error("CEP não encontrado")

    assert element.visible
    assert form.get_field("cep-erro") is None
    assert caplog.records


def test_hide_error():
    form = _address_form()
    svc = _service(form=form)

    svc.hide_error()
    assert form.get_field("cep-erro") is None

    svc.show_error("erro")
    svc.hide_error()
    assert not form.get_field("cep-erro").visible


def test_form_operations_need_a_form():
    svc = _service()

    with pytest.raises(RuntimeError):
        svc.apply_to_form(PAULISTA)
    with pytest.raises(RuntimeError):
        svc.show_error("erro")


def test_lookup_rejects_fullwidth_digits_without_request():
    requests = []
    svc = _service(requests=requests)

    with pytest.raises(ValidationError):
        svc.lookup("０１３１０１００")

    assert requests == []


def test_lookup_and_apply_routes_success_callback_error_to_on_failure():
    form = _address_form()
    failures = []

    def broken(record):
        raise ValueError("callback quebrado")

    svc = _service(form=form)

    with pytest.raises(ValueError):
        svc.lookup_and_apply(
            "01310100",
            callback=ResultCallback(on_success=broken, on_failure=failures.append),
        )

    assert len(failures) == 1
    assert isinstance(failures[0], ValueError)
    assert form.get_field("cep-erro") is None


def test_lookup_and_apply_success_callback_error_shows_inline_error():
    form = _address_form()

    def broken(record):
        raise ValueError("callback quebrado")

    svc = _service(form=form)

    with pytest.raises(ValueError):
        svc.lookup_and_apply("01310100", callback=ResultCallback(on_success=broken))

    assert form.get_field("cep-erro").text == "callback quebrado"


def test_timer_scheduler_runs_callback_once():
    import threading

    from cep_lookup.infra.scheduler import TimerScheduler

    fired = threading.Event()
    calls = []

    def callback():
        calls.append(1)
        fired.set()

    TimerScheduler().call_later(0.01, callback)

    assert fired.wait(2.0)
    assert calls == [1]


def test_show_error_auto_hides_with_timer_scheduler():
    import threading

    from cep_lookup.infra.scheduler import TimerScheduler

    hidden = threading.Event()

    class _SignalingScheduler(TimerScheduler):
        def call_later(self, delay_seconds, callback):
            def run():
                callback()
                hidden.set()

            super().call_later(delay_seconds, run)

    form = _address_form()
    svc = _service(form=form, scheduler=_SignalingScheduler(), error_display_seconds=0.01)

    element = svc.show_error("CEP não encontrado")

    assert hidden.wait(2.0)
    assert element is form.get_field("cep-erro")
    assert not element.visible
