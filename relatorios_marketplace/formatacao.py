"""
formatacao.py - Primitivas de formatacao compartilhadas pelos relatorios.

Moeda em Real (pt-BR), percentuais com sinal explicito, nomes de meses,
ultimo dia do mes e carimbo de data de geracao. Todas as funcoes sao
puras e deterministicas.

O arredondamento e sempre "meio para cima". Decimais e percentuais
arredondam o valor binario exato do float (criterio de Number.toFixed);
a moeda arredonda a menor representacao decimal do float (criterio de
Intl.NumberFormat), para que os relatorios batam centavo a centavo.
"""

import calendar
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

from .constants import (
    MESES,
    MARKETPLACE_LABELS,
    FORMATO_DATA_GERACAO,
)


def _arredondar(valor: float, casas: int, exato: bool = True) -> Decimal:
    # exato=False parte de repr(): 1.005 vira "1.005", nao 1.00499999...
    base = Decimal(valor) if exato else Decimal(repr(float(valor)))
    return base.quantize(Decimal(1).scaleb(-casas), rounding=ROUND_HALF_UP)


def formatar_decimal(valor: float, casas: int = 2) -> str:
    """
    Formata um numero com quantidade fixa de casas decimais (ponto decimal).

    O sinal e decidido pelo valor original: -0.04 com 1 casa vira "-0.0",
    enquanto zero negativo vira "0.0".

    Args:
        valor: Numero a ser formatado
        casas: Quantidade de casas decimais

    Returns:
        String formatada, ex: formatar_decimal(3.456) -> "3.46"
    """
    numero = float(valor)
    if numero == 0:
        numero = 0.0

    sinal = "-" if numero < 0 else ""
    return f"{sinal}{_arredondar(abs(numero), casas):f}"


def formatar_moeda(valor: float) -> str:
    """
    Formata um valor como moeda brasileira (BRL).

    Args:
        valor: Valor numerico

    Returns:
        String no formato "R$ 1.234,50" (negativos como "-R$ 1.234,50")
    """
    numero = float(valor)
    arredondado = _arredondar(abs(numero), 2, exato=False)

    texto = f"{arredondado:,.2f}".replace(',', 'X').replace('.', ',').replace('X', '.')

    prefixo = "-R$ " if numero < 0 else "R$ "
    return prefixo + texto


def formatar_percentual(valor: float) -> str:
    """
    Formata um percentual com uma casa decimal e sinal explicito.

    Args:
        valor: Percentual ja multiplicado por 100 (ex: 12.34)

    Returns:
        String formatada, ex: "+12.3%", "-5.0%", "+0.0%"
    """
    numero = float(valor)
    sinal = "+" if numero >= 0 else ""
    return f"{sinal}{formatar_decimal(numero, 1)}%"


def formatar_numero(valor: float) -> str:
    """Formata inteiro com separador de milhar pt-BR (ex: 12.345)."""
    return f"{float(valor):,.0f}".replace(',', '.')


def formatar_valor(valor: Any, formato: str) -> str:
    """
    Formata um valor de acordo com o tipo especificado.

    Args:
        valor: Valor a ser formatado
        formato: Tipo de formato ('numero', 'moeda', 'percentual', 'decimal')

    Returns:
        String formatada ("-" para valores ausentes)
    """
    if valor is None or pd.isna(valor):
        return "-"

    if formato == 'moeda':
        return formatar_moeda(valor)
    elif formato == 'percentual':
        return formatar_percentual(valor)
    elif formato == 'numero':
        return formatar_numero(valor)
    elif formato == 'decimal':
        return formatar_decimal(valor, 2)
    else:
        return str(valor)


def nome_mes(mes: int, meses: Sequence[str] = MESES) -> str:
    """Retorna o nome do mes (1 = Janeiro)."""
    return meses[mes - 1]


def ultimo_dia_mes(mes: int, ano: int) -> int:
    """Retorna o ultimo dia do mes informado (28 a 31)."""
    return calendar.monthrange(ano, mes)[1]


def rotulo_marketplace(
    marketplace: str,
    rotulos: Mapping[str, str] = MARKETPLACE_LABELS
) -> str:
    """Retorna o nome de exibicao do marketplace, ou o proprio valor se desconhecido."""
    return rotulos.get(marketplace, marketplace)


def formatar_data_geracao(momento: Optional[datetime] = None) -> str:
    """
    Formata o carimbo de geracao do relatorio.

    Args:
        momento: Data/hora de geracao (padrao: agora)

    Returns:
        String no formato "dd/MM/yyyy às HH:mm"
    """
    momento = momento or datetime.now()
    return momento.strftime(FORMATO_DATA_GERACAO)
