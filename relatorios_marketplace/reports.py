"""
reports.py - Geracao do relatorio em texto (WhatsApp) e dos cards de resumo.

O texto e montado em blocos fixos; cada bloco opcional so entra quando
ha dados para ele (ROAS, comparacao, destaques do consolidado).
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from .constants import TENDENCIA_ROTULOS
from .formatacao import (
    formatar_moeda,
    formatar_percentual,
    formatar_decimal,
    formatar_data_geracao,
    rotulo_marketplace,
    ultimo_dia_mes,
)
from .modelos import (
    Insights,
    InsightsConsolidados,
    RelatorioLoja,
    RelatorioCliente,
)
from .transform import top_lojas_por_vendas

logger = logging.getLogger(__name__)

Relatorio = Union[RelatorioLoja, RelatorioCliente]


def _bloco_titulo(relatorio: Relatorio) -> List[str]:
    periodo = relatorio.periodo
    if isinstance(relatorio, RelatorioCliente):
        titulo = f"📊 Relatório Consolidado {relatorio.nome_cliente} - {periodo.rotulo}"
    else:
        titulo = f"📊 Relatório de Vendas {relatorio.nome_cliente} - {periodo.rotulo}"

    return [
        titulo,
        "",
        f"🗓️ Período: 01 a {ultimo_dia_mes(periodo.mes, periodo.ano)} de {periodo.nome_mes}",
        "",
    ]


def _bloco_canais(relatorio: Relatorio, insights: Insights) -> List[str]:
    if isinstance(relatorio, RelatorioLoja):
        loja = relatorio.loja
        marketplace = rotulo_marketplace(loja.get('marketplace', ''))
        return [f"🌐 Canal: {marketplace.upper()} - {loja.get('nome', '').upper()}", ""]

    linhas = [
        f"🏪 Lojas: {insights.total_lojas} | Marketplaces: {insights.total_marketplaces}"
        f" | CNPJs: {insights.total_cnpjs}",
    ]
    for resumo in top_lojas_por_vendas(insights):
        marketplace = rotulo_marketplace(resumo.marketplace)
        linhas.append(
            f"🌐 {marketplace.upper()} - {resumo.nome.upper()}: {formatar_moeda(resumo.vendas)}"
        )
    linhas.append("")
    return linhas


def _bloco_resumo(insights: Insights) -> List[str]:
    return [
        "📈 Resumo do Desempenho",
        f"💰 Total de Vendas: {formatar_moeda(insights.total_vendas)}",
        f"📦 Unidades Vendidas: {insights.total_itens}",
        f"📣 Investimento em Ads: {formatar_moeda(insights.total_ads)}",
        "",
    ]


def _bloco_performance(insights: Insights) -> List[str]:
    if not insights.roas_media > 0:
        return []
    return [
        "📊 Métricas de Performance",
        f"🎯 ROAS Médio: {formatar_decimal(insights.roas_media, 2)}",
        f"💸 ACOS Médio: {formatar_decimal(insights.acos_media * 100, 1)}%",
        "",
    ]


def _bloco_comparacao(relatorio: Relatorio, insights: Insights) -> List[str]:
    if not insights.tem_comparacao or relatorio.comparacao is None:
        return []
    return [
        f"📈 Comparação vs {relatorio.comparacao.rotulo}",
        f"💰 Crescimento em Vendas: {formatar_percentual(insights.crescimento_vendas)}",
        f"📦 Crescimento em Unidades: {formatar_percentual(insights.crescimento_itens or 0)}",
        f"📣 Variação em Ads: {formatar_percentual(insights.crescimento_ads or 0)}",
        "",
    ]


def _bloco_destaques(insights: Insights) -> List[str]:
    if not isinstance(insights, InsightsConsolidados) or insights.melhor_loja is None:
        return []

    melhor = insights.melhor_loja
    linhas = [
        "🏆 Destaques",
        f"🥇 Maior faturamento: {melhor.nome} ({formatar_moeda(melhor.vendas)})",
    ]
    if insights.melhor_roas is not None and insights.melhor_roas.roas > 0:
        linhas.append(
            f"🎯 Melhor ROAS: {insights.melhor_roas.nome}"
            f" ({formatar_decimal(insights.melhor_roas.roas, 2)})"
        )
    linhas.append("")
    return linhas


def gerar_relatorio_whatsapp(
    relatorio: Relatorio,
    insights: Insights,
    gerado_em: Optional[datetime] = None
) -> str:
    """
    Gera o relatorio em texto para colar no WhatsApp.

    Serve tanto para o relatorio de uma loja quanto para o consolidado
    do cliente; os blocos especificos de cada um dependem do tipo do
    contexto e dos insights.

    Args:
        relatorio: RelatorioLoja ou RelatorioCliente
        insights: Insights calculados para o relatorio
        gerado_em: Data/hora do rodape (padrao: agora)

    Returns:
        Texto formatado com emojis
    """
    linhas = []
    linhas += _bloco_titulo(relatorio)
    linhas += _bloco_canais(relatorio, insights)
    linhas += _bloco_resumo(insights)
    linhas += _bloco_performance(insights)
    linhas += _bloco_comparacao(relatorio, insights)
    linhas += _bloco_destaques(insights)
    linhas += [
        f"💡 Insight: {insights.recomendacao}",
        "",
        f"🏷️ Tendência: {TENDENCIA_ROTULOS[insights.tendencia]}",
        "",
        "---",
        f"Relatório gerado automaticamente em {formatar_data_geracao(gerado_em)}",
    ]

    logger.debug("Relatorio de texto gerado para %s", relatorio.nome_cliente)

    return "\n".join(linhas)


def gerar_resumo_metricas(insights: Insights) -> List[Dict[str, Any]]:
    """
    Gera lista de metricas formatadas para exibicao em cards.

    Args:
        insights: Insights calculados

    Returns:
        Lista de dicionarios com label, valor e formato
    """
    cards = [
        {
            'label': 'Total de Vendas',
            'valor': insights.total_vendas,
            'formato': 'moeda',
            'icone': ':moneybag:'
        },
        {
            'label': 'Unidades Vendidas',
            'valor': insights.total_itens,
            'formato': 'numero',
            'icone': ':package:'
        },
        {
            'label': 'ROAS Médio',
            'valor': insights.roas_media,
            'formato': 'decimal',
            'icone': ':dart:'
        },
        {
            'label': 'Investimento em Ads',
            'valor': insights.total_ads,
            'formato': 'moeda',
            'icone': ':loudspeaker:'
        },
    ]

    if isinstance(insights, InsightsConsolidados):
        cards += [
            {
                'label': 'CNPJs',
                'valor': insights.total_cnpjs,
                'formato': 'numero',
                'icone': ':office:'
            },
            {
                'label': 'Lojas',
                'valor': insights.total_lojas,
                'formato': 'numero',
                'icone': ':convenience_store:'
            },
            {
                'label': 'Marketplaces',
                'valor': insights.total_marketplaces,
                'formato': 'numero',
                'icone': ':globe_with_meridians:'
            },
        ]

    if insights.tem_comparacao:
        cards.append({
            'label': 'Crescimento em Vendas',
            'valor': insights.crescimento_vendas,
            'formato': 'percentual',
            'icone': ':chart_with_upwards_trend:'
        })

    return cards
