"""
export.py - Funcoes de exportacao de dados.

Este modulo contem funcoes para exportar o breakdown por loja para
CSV e Excel e para montar o nome dos arquivos de relatorio.
"""

import re
from io import BytesIO

import pandas as pd
from openpyxl.utils import get_column_letter

from .constants import (
    PREFIXO_RELATORIO_LOJA,
    PREFIXO_RELATORIO_CLIENTE,
)
from .formatacao import nome_mes, rotulo_marketplace
from .modelos import InsightsConsolidados, Periodo

COLUNAS_BREAKDOWN = [
    'Loja', 'Marketplace', 'CNPJ', 'Vendas', 'Ads', 'Itens', 'ROAS'
]


def tabela_breakdown(insights: InsightsConsolidados) -> pd.DataFrame:
    """
    Monta a tabela de desempenho por loja para exibicao/exportacao.

    Args:
        insights: Insights consolidados do cliente

    Returns:
        DataFrame ordenado por vendas (maior primeiro)
    """
    linhas = [
        {
            'Loja': r.nome,
            'Marketplace': rotulo_marketplace(r.marketplace),
            'CNPJ': r.cnpj,
            'Vendas': r.vendas,
            'Ads': r.ads,
            'Itens': r.itens,
            'ROAS': round(r.roas, 2),
        }
        for r in insights.lojas_breakdown
    ]

    df = pd.DataFrame(linhas, columns=COLUNAS_BREAKDOWN)
    return df.sort_values('Vendas', ascending=False, kind='stable').reset_index(drop=True)


def exportar_csv(df: pd.DataFrame) -> bytes:
    """
    Exporta um DataFrame para formato CSV.

    Args:
        df: DataFrame a ser exportado

    Returns:
        Bytes do arquivo CSV
    """
    return df.to_csv(index=False, sep=';', decimal=',').encode('utf-8-sig')


def exportar_excel(df: pd.DataFrame, nome_aba: str = "Lojas") -> bytes:
    """
    Exporta um DataFrame para formato Excel (.xlsx).

    Args:
        df: DataFrame a ser exportado
        nome_aba: Nome da aba na planilha

    Returns:
        Bytes do arquivo Excel
    """
    output = BytesIO()
    # Limite de 31 caracteres do Excel
    nome_aba = nome_aba[:31]

    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=nome_aba, index=False)

        # Ajustar largura das colunas automaticamente
        worksheet = writer.sheets[nome_aba]
        for idx, col in enumerate(df.columns):
            if len(df) > 0:
                max_content = df[col].astype(str).map(len).max()
            else:
                max_content = 0

            max_length = max(max_content, len(str(col))) + 2
            max_length = max(min(max_length, 50), 10)

            worksheet.column_dimensions[get_column_letter(idx + 1)].width = max_length

    return output.getvalue()


def _nome_seguro(texto: str) -> str:
    # Remove apenas caracteres invalidos em nomes de arquivo
    return re.sub(r'[\\/:*?"<>|]+', '-', str(texto)).strip() or 'sem-nome'


def gerar_nome_arquivo_relatorio(
    nome: str,
    periodo: Periodo,
    consolidado: bool = False,
    extensao: str = "pdf"
) -> str:
    """
    Gera o nome do arquivo de relatorio.

    Args:
        nome: Nome da loja (ou do cliente, no consolidado)
        periodo: Periodo do relatorio
        consolidado: Se True, usa o prefixo do relatorio consolidado
        extensao: Extensao do arquivo (sem ponto)

    Returns:
        Nome no formato "relatorio-{nome}-{Mes}-{ano}.pdf"
    """
    prefixo = PREFIXO_RELATORIO_CLIENTE if consolidado else PREFIXO_RELATORIO_LOJA
    return f"{prefixo}-{_nome_seguro(nome)}-{nome_mes(periodo.mes)}-{periodo.ano}.{extensao}"
