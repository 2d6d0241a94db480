from __future__ import annotations

import re


_NON_DIGIT = re.compile(r"\D", re.ASCII)
_CEP8 = re.compile(r"^\d{8}$", re.ASCII)
_CEP_PARTS = re.compile(r"(\d{5})(\d{3})", re.ASCII)


def only_digits(raw: str | None) -> str:
    return _NON_DIGIT.sub("", raw or "")


def is_valid_cep(raw: str | None) -> bool:
    """
    Remove tudo que não é dígito e confere se sobraram exatamente 8 dígitos.
    '01310-100' e '01310100' são válidos.
    """
    return bool(_CEP8.match(only_digits(raw)))


def format_cep(raw: str | None) -> str:
    """
    Formata o CEP para exibição (00000-000).

    Se os dígitos não tiverem o padrão 5+3, devolve só os dígitos, sem erro.
    Com mais de 8 dígitos apenas o primeiro grupo 5+3 recebe o hífen.
    """
    digits = only_digits(raw)
    return _CEP_PARTS.sub(r"\1-\2", digits, count=1)
