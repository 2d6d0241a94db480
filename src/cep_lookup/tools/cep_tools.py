from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from pydantic import BaseModel, Field

from cep_lookup.app.container import Container
from cep_lookup.core.errors import CepError, ServiceError
from cep_lookup.infra.form import InMemoryForm
from cep_lookup.services.cep_service import CepService


class LookupResult(BaseModel):
    """Resultado da consulta de um CEP na BrasilAPI."""

    cep: str = Field(..., description="CEP formatado (00000-000) ou apenas os dígitos informados")
    valid: bool = Field(..., description="True se o CEP tem 8 dígitos")
    address: dict[str, Any] | None = Field(
        default=None,
        description="Objeto devolvido pela BrasilAPI (cep, state, city, neighborhood, street, ...)",
    )
    error: str | None = Field(default=None, description="Tipo do erro: ValidationError, NotFoundError, ...")
    message: str | None = Field(default=None, description="Mensagem de erro para o usuário")
    status_code: int | None = Field(default=None, description="Status HTTP quando a API respondeu com erro")


class FormFillResult(BaseModel):
    """Estado do formulário depois de buscar o CEP e preencher os campos."""

    fields: dict[str, str] = Field(default_factory=dict, description="id do campo -> valor final")
    address: dict[str, Any] | None = None
    error_element: dict[str, Any] | None = Field(
        default=None,
        description="Elemento de erro exibido após o campo do CEP, se houve falha",
    )
    message: str | None = None


def _lookup(service: CepService, cep: str) -> LookupResult:
    result = LookupResult(cep=service.format(cep), valid=service.validate(cep))
    try:
        result.address = service.lookup(cep)
    except CepError as e:
        result.error = type(e).__name__
        result.message = str(e)
        if isinstance(e, ServiceError):
            result.status_code = e.status_code
    return result


def _fill_form(
    service: CepService,
    cep: str,
    fields: dict[str, str] | None,
    binding: dict[str, str] | None,
) -> FormFillResult:
    initial = dict(fields or {})
    # o campo do CEP ancora a mensagem de erro
    initial.setdefault(service.cep_field_id, cep)
    form = InMemoryForm(initial)

    out = FormFillResult()
    try:
        out.address = service.lookup_and_apply(cep, binding, form=form)
    except CepError as e:
        out.message = str(e)
        error_element = form.get_field(service.error_element_id)
        if error_element is not None:
            out.error_element = error_element.to_dict()

    out.fields = {k: v for k, v in form.values().items() if k != service.error_element_id}
    return out


def register_cep_tools(mcp: FastMCP, container: Container) -> None:
    cep_service = container.cep_service
    form_tool_service = container.form_tool_service

    @mcp.tool(
        name="validate_cep",
        description="Verifica se um CEP brasileiro tem 8 dígitos (aceita com ou sem hífen) e devolve o CEP formatado.",
    )
    def validate_cep(cep: str) -> dict[str, Any]:
        return {"cep": cep_service.format(cep), "valid": cep_service.validate(cep)}

    @mcp.tool(
        name="format_cep",
        description="Formata um CEP para exibição (00000-000). Valores fora do padrão voltam só com os dígitos.",
    )
    def format_cep(cep: str) -> dict[str, Any]:
        return {"cep": cep_service.format(cep)}

    @mcp.tool(
        name="lookup_cep",
        description=(
            "Consulta o endereço (rua, bairro, cidade, estado) de um CEP na BrasilAPI. "
            "Erros de validação, CEP inexistente ou falha da API voltam no campo 'message'."
        ),
    )
    def lookup_cep(cep: str) -> LookupResult:
        """
        CEP → endereço.

        - cep: ex) '01310-100' ou '01310100'
        """
        return _lookup(cep_service, cep)

    @mcp.tool(
        name="fill_address_form",
        description=(
            "Busca o CEP e preenche um formulário de endereço (campos cep/rua/bairro/cidade/estado). "
            "Use 'binding' para mapear cada campo lógico para o id real do campo no formulário."
        ),
    )
    def fill_address_form(
        cep: str,
        fields: dict[str, str] | None = None,
        binding: dict[str, str] | None = None,
    ) -> FormFillResult:
        """
        - fields: valores atuais do formulário, id -> valor
        - binding: ex) {"cidade": "city-input"}; sobrescreve o mapeamento padrão
        """
        return _fill_form(form_tool_service, cep, fields, binding)
