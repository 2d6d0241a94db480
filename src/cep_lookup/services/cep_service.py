from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from cep_lookup.core.errors import CepError, ValidationError
from cep_lookup.core.models import (
    DEFAULT_RESPONSE_KEYS,
    AddressRecord,
    FormElement,
    ResultCallback,
    merge_binding,
)
from cep_lookup.core.text import format_cep, is_valid_cep, only_digits
from cep_lookup.infra.form import FormBinding
from cep_lookup.infra.providers.brasilapi import BrasilApiProvider
from cep_lookup.infra.scheduler import Scheduler, TimerScheduler

log = logging.getLogger(__name__)

ERROR_ELEMENT_CLASS = "alert alert-danger mt-2"
ERROR_ELEMENT_STYLE = {"font-size": "0.875rem"}


class CepService:
    def __init__(
        self,
        *,
        provider: BrasilApiProvider,
        form: FormBinding | None = None,
        scheduler: Scheduler | None = None,
        error_element_id: str = "cep-erro",
        cep_field_id: str = "cep",
        error_display_seconds: float = 5.0,
        response_keys: Mapping[str, str] | None = None,
    ) -> None:
        self._provider = provider
        self._form = form
        self._scheduler = scheduler or TimerScheduler()
        self._error_element_id = error_element_id
        self._cep_field_id = cep_field_id
        self._error_display_seconds = error_display_seconds
        self._response_keys = dict(DEFAULT_RESPONSE_KEYS if response_keys is None else response_keys)

    @property
    def error_element_id(self) -> str:
        return self._error_element_id

    @property
    def cep_field_id(self) -> str:
        return self._cep_field_id

    def validate(self, raw: str) -> bool:
        return is_valid_cep(raw)

    def format(self, raw: str) -> str:
        return format_cep(raw)

    def lookup(self, raw: str) -> AddressRecord:
        """
        Busca o endereço do CEP na BrasilAPI.

        Args:
            raw: CEP com ou sem máscara ('01310-100', '01310100')

        Returns:
            Objeto JSON da API, sem renomear chaves

        Raises:
            ValidationError: antes de qualquer requisição, se não houver 8 dígitos
            NotFoundError / ServiceError / TransportError: vindos do HttpClient
        """
        cep = only_digits(raw)
        try:
            if not is_valid_cep(cep):
                raise ValidationError("CEP deve ter 8 dígitos")
            return self._provider.fetch(cep)
        except CepError as e:
            log.error("Erro ao buscar CEP %r: %s", raw, e)
            raise

    def apply_to_form(
        self,
        record: Mapping[str, Any],
        binding: Mapping[str, str] | None = None,
        *,
        form: FormBinding | None = None,
    ) -> None:
        """
        Preenche os campos do formulário com os dados do CEP.
        Campo inexistente ou valor vazio é ignorado sem erro.
        """
        target = self._resolve_form(form)
        for logical, field_id in merge_binding(binding).items():
            value = self._record_value(record, logical)
            if value is None or value == "":
                continue
            if target.get_field(field_id) is None:
                continue
            target.set_field(field_id, str(value))

    def lookup_and_apply(
        self,
        raw: str,
        binding: Mapping[str, str] | None = None,
        callback: ResultCallback | None = None,
        *,
        form: FormBinding | None = None,
    ) -> AddressRecord:
        """
        Busca o CEP e preenche o formulário.

        Qualquer erro, inclusive um erro levantado por on_success, vai para
        on_failure (ou para show_error, sem callback) e é relançado.
        """
        target = self._resolve_form(form)
        try:
            record = self.lookup(raw)
            self.apply_to_form(record, binding, form=target)
            if callback is not None and callback.on_success is not None:
                callback.on_success(record)
        except Exception as e:
            if callback is not None and callback.on_failure is not None:
                callback.on_failure(e)
            else:
                self.show_error(str(e), form=target)
            raise
        return record

    def show_error(self, message: str, *, form: FormBinding | None = None) -> FormElement:
        target = self._resolve_form(form)
        element = target.get_field(self._error_element_id)

        if element is None:
            element = FormElement(
                id=self._error_element_id,
                css_class=ERROR_ELEMENT_CLASS,
                style=dict(ERROR_ELEMENT_STYLE),
            )
            if not target.insert_after(self._cep_field_id, element):
                log.warning("Campo %r não encontrado; mensagem de erro não anexada ao formulário", self._cep_field_id)

        element.text = message
        element.visible = True

        # o timer não é cancelado: só esconde de novo o mesmo elemento
        def _hide() -> None:
            element.visible = False

        self._scheduler.call_later(self._error_display_seconds, _hide)
        return element

    def hide_error(self, *, form: FormBinding | None = None) -> None:
        element = self._resolve_form(form).get_field(self._error_element_id)
        if element is not None:
            element.visible = False

    def _record_value(self, record: Mapping[str, Any], logical: str) -> Any:
        if logical in record:
            return record[logical]
        remote_key = self._response_keys.get(logical)
        if remote_key is None:
            return None
        return record.get(remote_key)

    def _resolve_form(self, form: FormBinding | None) -> FormBinding:
        target = form if form is not None else self._form
        if target is None:
            raise RuntimeError("No form binding configured for CepService.")
        return target
