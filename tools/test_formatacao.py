#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Testes das primitivas de formatacao (moeda, percentual, datas).

USO:
    pytest tools/test_formatacao.py
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Adicionar raiz do projeto ao path
sys.path.insert(0, str(Path(__file__).parent.parent))

from relatorios_marketplace.formatacao import (
    formatar_moeda,
    formatar_percentual,
    formatar_decimal,
    formatar_numero,
    formatar_valor,
    nome_mes,
    ultimo_dia_mes,
    rotulo_marketplace,
    formatar_data_geracao,
)


@pytest.mark.parametrize("valor, esperado", [
    (0, "+0.0%"),
    (12.34, "+12.3%"),
    (-12.34, "-12.3%"),
    (-5, "-5.0%"),
    (25.0, "+25.0%"),
])
def test_percentual_com_sinal(valor, esperado):
    assert formatar_percentual(valor) == esperado


def test_percentual_negativo_proximo_de_zero():
    # Arredonda para zero mas mantem o sinal do valor original
    assert formatar_percentual(-0.04) == "-0.0%"
    assert formatar_percentual(-0.0) == "+0.0%"


def test_percentual_arredonda_meio_para_cima():
    assert formatar_percentual(0.25) == "+0.3%"
    # 1.005 e 1.00499999... em binario
    assert formatar_decimal(1.005, 2) == "1.00"


@pytest.mark.parametrize("valor, esperado", [
    (1234.5, "R$ 1.234,50"),
    (1000, "R$ 1.000,00"),
    (0, "R$ 0,00"),
    (13000, "R$ 13.000,00"),
    (1234567.891, "R$ 1.234.567,89"),
    (-50.5, "-R$ 50,50"),
])
def test_moeda(valor, esperado):
    assert formatar_moeda(valor) == esperado


@pytest.mark.parametrize("valor, esperado", [
    (1.005, "R$ 1,01"),
    (2.675, "R$ 2,68"),
    (10.075, "R$ 10,08"),
    (-2.675, "-R$ 2,68"),
])
def test_moeda_arredonda_pela_forma_decimal(valor, esperado):
    """Moeda arredonda o decimal que o float representa, nao o binario exato."""
    assert formatar_moeda(valor) == esperado
    # Decimais seguem o binario exato (1.005 e 1.00499999...)
    assert formatar_decimal(1.005, 2) == "1.00"


def test_decimal():
    assert formatar_decimal(3.456) == "3.46"
    assert formatar_decimal(3.5, 2) == "3.50"
    assert formatar_decimal(20.0, 1) == "20.0"


def test_numero_e_valor():
    assert formatar_numero(12345) == "12.345"
    assert formatar_valor(None, 'moeda') == "-"
    assert formatar_valor(float('nan'), 'decimal') == "-"
    assert formatar_valor(70, 'numero') == "70"
    assert formatar_valor(3.5, 'decimal') == "3.50"
    assert formatar_valor(-0.04, 'percentual') == "-0.0%"


def test_nome_mes():
    assert nome_mes(1) == "Janeiro"
    assert nome_mes(3) == "Março"
    assert nome_mes(12) == "Dezembro"
    assert nome_mes(2, meses=("Jan", "Feb")) == "Feb"


@pytest.mark.parametrize("mes, ano, esperado", [
    (2, 2024, 29),
    (2, 2023, 28),
    (3, 2024, 31),
    (4, 2024, 30),
    (12, 2024, 31),
])
def test_ultimo_dia_mes(mes, ano, esperado):
    assert ultimo_dia_mes(mes, ano) == esperado


def test_rotulo_marketplace():
    assert rotulo_marketplace("mercado_livre") == "Mercado Livre"
    assert rotulo_marketplace("shopee") == "Shopee"
    # Desconhecido volta como veio
    assert rotulo_marketplace("loja_propria") == "loja_propria"


def test_data_geracao():
    assert formatar_data_geracao(datetime(2024, 4, 1, 9, 5)) == "01/04/2024 às 09:05"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
