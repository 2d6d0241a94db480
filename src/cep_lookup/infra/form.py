from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from cep_lookup.core.models import FormElement


class FormBinding(Protocol):
    """
    Acesso ao formulário por id de campo.
    Qualquer camada de UI que implemente estes três métodos serve.
    """

    def get_field(self, field_id: str) -> FormElement | None: ...

    def set_field(self, field_id: str, value: str) -> None: ...

    def insert_after(self, anchor_id: str, element: FormElement) -> bool: ...


class InMemoryForm:
    def __init__(self, fields: Mapping[str, str] | None = None) -> None:
        self._elements: list[FormElement] = [
            FormElement(id=field_id, value=value) for field_id, value in (fields or {}).items()
        ]

    def get_field(self, field_id: str) -> FormElement | None:
        for el in self._elements:
            if el.id == field_id:
                return el
        return None

    def set_field(self, field_id: str, value: str) -> None:
        el = self.get_field(field_id)
        if el is None:
            raise KeyError(field_id)
        el.value = value

    def insert_after(self, anchor_id: str, element: FormElement) -> bool:
        for idx, el in enumerate(self._elements):
            if el.id == anchor_id:
                self._elements.insert(idx + 1, element)
                return True
        return False

    def order(self) -> list[str]:
        return [el.id for el in self._elements]

    def values(self) -> dict[str, str]:
        return {el.id: el.value for el in self._elements}
