from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

# Objeto JSON devolvido pela API, sem renomear chaves.
AddressRecord = dict[str, Any]

# campo lógico -> id do campo no formulário
FieldBinding = dict[str, str]

DEFAULT_FIELD_BINDING: dict[str, str] = {
    "cidade": "cidade",
    "bairro": "bairro",
    "rua": "rua",
    "estado": "estado",
    "cep": "cep",
}

# campo lógico -> chave no JSON da BrasilAPI
DEFAULT_RESPONSE_KEYS: dict[str, str] = {
    "cep": "cep",
    "rua": "street",
    "bairro": "neighborhood",
    "cidade": "city",
    "estado": "state",
}


def merge_binding(overrides: Mapping[str, str] | None = None) -> FieldBinding:
    return {**DEFAULT_FIELD_BINDING, **(overrides or {})}


@dataclass(frozen=True)
class ResultCallback:
    on_success: Callable[[AddressRecord], Any] | None = None
    on_failure: Callable[[Exception], Any] | None = None


@dataclass
class FormElement:
    id: str
    value: str = ""
    text: str = ""
    css_class: str = ""
    visible: bool = True
    style: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "value": self.value,
            "text": self.text,
            "css_class": self.css_class,
            "visible": self.visible,
            "style": dict(self.style),
        }
