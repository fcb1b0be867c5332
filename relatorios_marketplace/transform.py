"""
transform.py - Calculo de insights e metricas agregadas.

Este modulo contem:
- Filtro de dados mensais por periodo (igualdade exata de mes/ano)
- Agregacao de totais e medias de ROAS/ACOS
- Insights por loja e consolidados por cliente (crescimento, tendencia,
  recomendacao, breakdown e ranking de lojas)
- Metricas gerais do dashboard (resumo, serie mensal, faturamento por
  marketplace)

Divisoes por zero resultam em 0: o crescimento sobre uma base zerada e
0 e medias sem valores sao 0.
"""

import logging
import operator
from dataclasses import dataclass
from functools import reduce
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

import pandas as pd

from .constants import (
    COL_ID,
    COL_LOJA_ID,
    COL_MES,
    COL_ANO,
    COL_FATURAMENTO,
    COL_INVESTIMENTO,
    COL_ITENS,
    COL_ROAS,
    COL_ACOS,
    MARKETPLACE_OUTROS,
    TENDENCIA_ALTA,
    TENDENCIA_BAIXA,
    LIMIAR_TENDENCIA_LOJA,
    LIMIAR_TENDENCIA_CLIENTE,
    ROAS_ALTO,
    ROAS_BAIXO,
    TOP_LOJAS_RELATORIO,
    RECOMENDACOES_LOJA,
    RECOMENDACOES_CLIENTE,
)
from .io import dados_para_dataframe
from .modelos import (
    Periodo,
    Insights,
    InsightsConsolidados,
    ResumoLoja,
    RelatorioLoja,
    RelatorioCliente,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegrasRecomendacao:
    """Limiar de tendencia e textos de recomendacao de um tipo de relatorio."""

    limiar_tendencia: float
    mensagens: Mapping[str, str]


REGRAS_LOJA = RegrasRecomendacao(LIMIAR_TENDENCIA_LOJA, RECOMENDACOES_LOJA)
REGRAS_CLIENTE = RegrasRecomendacao(LIMIAR_TENDENCIA_CLIENTE, RECOMENDACOES_CLIENTE)


def _somar(serie: pd.Series) -> float:
    # Soma sequencial na ordem das linhas
    return reduce(operator.add, serie.tolist(), 0)


def _media(serie: pd.Series) -> float:
    valores = serie.dropna()
    if len(valores) == 0:
        return 0
    return _somar(valores) / len(valores)


def filtrar_periodo(df: pd.DataFrame, periodo: Periodo) -> pd.DataFrame:
    """
    Filtra as linhas de um periodo (mes e ano exatos).

    Args:
        df: DataFrame de dados mensais
        periodo: Periodo desejado

    Returns:
        DataFrame filtrado
    """
    mask = (df[COL_MES] == periodo.mes) & (df[COL_ANO] == periodo.ano)
    return df[mask]


def agregar_periodo(df_periodo: pd.DataFrame) -> Dict[str, float]:
    """
    Soma faturamento, investimento e itens e calcula medias de ROAS/ACOS.

    Varios registros da mesma loja no periodo (campanhas separadas) sao
    somados; apenas ROAS e ACOS sao medias, ignorando ausentes.

    Args:
        df_periodo: Linhas ja filtradas por periodo

    Returns:
        Dicionario com vendas, ads, itens, roas e acos
    """
    return {
        'vendas': _somar(df_periodo[COL_FATURAMENTO]),
        'ads': _somar(df_periodo[COL_INVESTIMENTO]),
        'itens': int(_somar(df_periodo[COL_ITENS])),
        'roas': _media(df_periodo[COL_ROAS]),
        'acos': _media(df_periodo[COL_ACOS]),
    }


def calcular_crescimento(atual: float, base: float) -> float:
    """Variacao percentual de base para atual; 0 quando a base e zero."""
    if base > 0:
        return (atual - base) / base * 100
    return 0


def _aplicar_comparacao(
    insights: Insights,
    base: Dict[str, float],
    regras: RegrasRecomendacao
) -> None:
    insights.crescimento_vendas = calcular_crescimento(insights.total_vendas, base['vendas'])
    insights.crescimento_itens = calcular_crescimento(insights.total_itens, base['itens'])
    insights.crescimento_ads = calcular_crescimento(insights.total_ads, base['ads'])

    if insights.crescimento_vendas > regras.limiar_tendencia:
        insights.tendencia = TENDENCIA_ALTA
        insights.recomendacao = regras.mensagens['alta']
    elif insights.crescimento_vendas < -regras.limiar_tendencia:
        insights.tendencia = TENDENCIA_BAIXA
        insights.recomendacao = regras.mensagens['baixa']


def _aplicar_regras_roas(insights: Insights, regras: RegrasRecomendacao) -> None:
    # ROAS tem a palavra final sobre a recomendacao de crescimento
    if insights.roas_media > ROAS_ALTO:
        insights.recomendacao = regras.mensagens['roas_alto']
    elif insights.roas_media < ROAS_BAIXO:
        insights.recomendacao = regras.mensagens['roas_baixo']


def _calcular_insights_base(
    df: pd.DataFrame,
    periodo: Periodo,
    comparacao: Optional[Periodo],
    regras: RegrasRecomendacao,
    classe: Type[Insights] = Insights,
    **extras: Any
) -> Insights:
    totais = agregar_periodo(filtrar_periodo(df, periodo))

    insights = classe(
        total_vendas=totais['vendas'],
        total_ads=totais['ads'],
        total_itens=totais['itens'],
        roas_media=totais['roas'],
        acos_media=totais['acos'],
        recomendacao=regras.mensagens['padrao'],
        **extras
    )

    if comparacao is not None:
        df_base = filtrar_periodo(df, comparacao)
        if len(df_base) > 0:
            _aplicar_comparacao(insights, agregar_periodo(df_base), regras)
        else:
            logger.debug("Sem dados no periodo de comparacao %s", comparacao.rotulo)

    _aplicar_regras_roas(insights, regras)

    return insights


def calcular_insights(relatorio: RelatorioLoja) -> Insights:
    """
    Calcula os insights de uma loja para o periodo do relatorio.

    Args:
        relatorio: Contexto com a loja, seus dados mensais e os periodos

    Returns:
        Insights com totais, medias, crescimento (se houver comparacao),
        tendencia (limiar de 5%) e recomendacao
    """
    df = dados_para_dataframe(relatorio.dados)

    logger.debug(
        "Insights da loja %s: %s linhas, periodo %s",
        relatorio.loja.get('nome'), len(df), relatorio.periodo.rotulo
    )

    return _calcular_insights_base(df, relatorio.periodo, relatorio.comparacao, REGRAS_LOJA)


def _dados_da_loja(loja: Dict[str, Any]) -> pd.DataFrame:
    df = dados_para_dataframe(loja.get('dados_mensais') or [])
    df[COL_LOJA_ID] = loja.get(COL_ID)
    return df


def calcular_breakdown_lojas(
    lojas: List[Dict[str, Any]],
    dados_por_loja: List[pd.DataFrame],
    periodo: Periodo
) -> List[ResumoLoja]:
    """
    Calcula as metricas de cada loja no periodo.

    Lojas sem faturamento, sem investimento e sem itens no periodo ficam
    de fora do breakdown.

    Args:
        lojas: Lojas do cliente
        dados_por_loja: DataFrame de dados mensais de cada loja (mesma ordem)
        periodo: Periodo do relatorio

    Returns:
        Lista de ResumoLoja na ordem das lojas
    """
    breakdown = []

    for loja, df in zip(lojas, dados_por_loja):
        totais = agregar_periodo(filtrar_periodo(df, periodo))

        if totais['vendas'] == 0 and totais['ads'] == 0 and totais['itens'] == 0:
            continue

        cnpj = loja.get('cnpj') or {}
        breakdown.append(ResumoLoja(
            id=loja.get(COL_ID),
            nome=loja.get('nome', ''),
            marketplace=loja.get('marketplace', MARKETPLACE_OUTROS),
            cnpj=cnpj.get('nome_fantasia', ''),
            vendas=totais['vendas'],
            ads=totais['ads'],
            itens=totais['itens'],
            roas=totais['roas'],
        ))

    return breakdown


def _melhor_por(breakdown: List[ResumoLoja], atributo: str) -> Optional[ResumoLoja]:
    # Comparacao estrita: em empate vence a primeira loja
    melhor = None
    for resumo in breakdown:
        if melhor is None or getattr(resumo, atributo) > getattr(melhor, atributo):
            melhor = resumo
    return melhor


def calcular_insights_cliente(relatorio: RelatorioCliente) -> InsightsConsolidados:
    """
    Calcula os insights consolidados de todas as lojas de um cliente.

    Alem das metricas da loja, inclui contagem de CNPJs, lojas e
    marketplaces, o breakdown por loja e as melhores lojas por
    faturamento e por ROAS. A tendencia usa limiar de 10%.

    Args:
        relatorio: Contexto com o cliente, suas lojas (com dados_mensais)
            e os periodos

    Returns:
        InsightsConsolidados
    """
    lojas = relatorio.lojas
    dados_por_loja = [_dados_da_loja(loja) for loja in lojas]

    if dados_por_loja:
        df = pd.concat(dados_por_loja, ignore_index=True)
    else:
        df = dados_para_dataframe([])

    cnpjs = {(loja.get('cnpj') or {}).get('id') for loja in lojas}
    cnpjs.discard(None)
    marketplaces = {loja.get('marketplace') for loja in lojas}

    breakdown = calcular_breakdown_lojas(lojas, dados_por_loja, relatorio.periodo)

    logger.debug(
        "Insights do cliente %s: %s lojas, %s com movimento em %s",
        relatorio.nome_cliente, len(lojas), len(breakdown), relatorio.periodo.rotulo
    )

    return _calcular_insights_base(
        df,
        relatorio.periodo,
        relatorio.comparacao,
        REGRAS_CLIENTE,
        classe=InsightsConsolidados,
        total_cnpjs=len(cnpjs),
        total_lojas=len(lojas),
        total_marketplaces=len(marketplaces),
        lojas_breakdown=breakdown,
        melhor_loja=_melhor_por(breakdown, 'vendas'),
        melhor_roas=_melhor_por(breakdown, 'roas'),
    )


def top_lojas_por_vendas(
    insights: InsightsConsolidados,
    top_n: int = TOP_LOJAS_RELATORIO
) -> List[ResumoLoja]:
    """Lojas do breakdown ordenadas por faturamento (maior primeiro)."""
    return sorted(insights.lojas_breakdown, key=lambda r: r.vendas, reverse=True)[:top_n]


# =============================================================================
# DASHBOARD
# =============================================================================
def calcular_resumo_geral(
    clientes: Iterable[Any],
    cnpjs: Iterable[Any],
    lojas: Iterable[Any],
    dados: Any
) -> Dict[str, Any]:
    """
    Calcula os cards do dashboard.

    Args:
        clientes: Clientes cadastrados
        cnpjs: CNPJs cadastrados
        lojas: Lojas cadastradas
        dados: Todos os dados mensais

    Returns:
        Dicionario com contagens, faturamento/investimento totais e ROAS global
    """
    df = dados_para_dataframe(dados)

    total_faturamento = _somar(df[COL_FATURAMENTO])
    total_investimento = _somar(df[COL_INVESTIMENTO])

    return {
        'clientes': len(list(clientes)),
        'cnpjs': len(list(cnpjs)),
        'lojas': len(list(lojas)),
        'total_faturamento': total_faturamento,
        'total_investimento': total_investimento,
        'roas_global': total_faturamento / total_investimento if total_investimento > 0 else 0,
    }


def calcular_serie_mensal(dados: Any) -> pd.DataFrame:
    """
    Agrega os dados mensais por periodo, em ordem cronologica.

    ROAS ausente conta como 0 na media do periodo.

    Args:
        dados: Dados mensais de todas as lojas

    Returns:
        DataFrame com periodo ("m/aaaa"), mes, ano, faturamento,
        investimento, roas e count
    """
    df = dados_para_dataframe(dados)
    df['_roas'] = df[COL_ROAS].fillna(0.0)

    agg = df.groupby([COL_ANO, COL_MES]).agg(
        faturamento=(COL_FATURAMENTO, 'sum'),
        investimento=(COL_INVESTIMENTO, 'sum'),
        roas=('_roas', 'mean'),
        count=(COL_FATURAMENTO, 'size'),
    ).reset_index()

    agg = agg.sort_values([COL_ANO, COL_MES]).reset_index(drop=True)
    agg.insert(0, 'periodo', agg[COL_MES].astype(str) + '/' + agg[COL_ANO].astype(str))

    return agg[['periodo', COL_MES, COL_ANO, 'faturamento', 'investimento', 'roas', 'count']]


def calcular_faturamento_por_marketplace(
    dados: Any,
    lojas: List[Dict[str, Any]]
) -> pd.DataFrame:
    """
    Soma o faturamento por marketplace.

    Dados de lojas desconhecidas entram em 'outros'.

    Args:
        dados: Dados mensais (com 'loja_id')
        lojas: Lojas com 'id' e 'marketplace'

    Returns:
        DataFrame com marketplace e faturamento, na ordem de aparicao
    """
    df = dados_para_dataframe(dados)
    marketplace_por_loja = {loja.get(COL_ID): loja.get('marketplace') for loja in lojas}

    df['marketplace'] = df[COL_LOJA_ID].map(marketplace_por_loja).fillna(MARKETPLACE_OUTROS)

    agg = df.groupby('marketplace', sort=False)[COL_FATURAMENTO].sum().reset_index()
    return agg.rename(columns={COL_FATURAMENTO: 'faturamento'})
