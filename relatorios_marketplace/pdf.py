"""
pdf.py - Geracao do relatorio em PDF.

Pagina A4 com texto posicionado por coordenadas (mm). Cada secao tem
tamanho e cor de fonte proprios; o texto da recomendacao e quebrado na
largura util antes de ser posicionado. Quando o conteudo passa do limite
inferior uma nova pagina e aberta, com o rodape repetido.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

from fpdf import FPDF

from .constants import (
    PDF_MARGEM_X,
    PDF_LARGURA_LINHA,
    PDF_LARGURA_TEXTO,
    PDF_LIMITE_Y,
    PDF_RODAPE_Y,
    PDF_COR_TEXTO,
    PDF_COR_METRICAS,
    PDF_COR_INSIGHTS,
    PDF_COR_RODAPE,
    PDF_FONTE,
    TENDENCIA_ROTULOS,
)
from .formatacao import (
    formatar_moeda,
    formatar_percentual,
    formatar_decimal,
    formatar_data_geracao,
    rotulo_marketplace,
)
from .modelos import (
    Insights,
    InsightsConsolidados,
    RelatorioLoja,
    RelatorioCliente,
)

logger = logging.getLogger(__name__)

Relatorio = Union[RelatorioLoja, RelatorioCliente]

TOPO_Y = 30
Y_RECOMENDACOES = 230


def _texto_pdf(texto: str) -> str:
    # Fontes padrao do PDF so aceitam latin-1
    return str(texto).encode('latin-1', 'replace').decode('latin-1')


class RelatorioPDF(FPDF):
    """Documento com cursor vertical e rodape fixo em todas as paginas."""

    def __init__(self, rodape: str):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.rodape = rodape
        self.cursor_y = TOPO_Y
        self.set_auto_page_break(False)

    def footer(self):
        self.set_font(PDF_FONTE, size=8)
        self.set_text_color(*PDF_COR_RODAPE)
        self.text(PDF_MARGEM_X, PDF_RODAPE_Y, _texto_pdf(self.rodape))

    def nova_pagina(self):
        self.add_page()
        self.cursor_y = TOPO_Y

    def escrever(self, texto: str, tamanho: int, cor: Tuple[int, int, int], passo: float):
        """Escreve uma linha na posicao do cursor e avanca `passo` mm."""
        if self.cursor_y > PDF_LIMITE_Y:
            self.nova_pagina()
        self.set_font(PDF_FONTE, size=tamanho)
        self.set_text_color(*cor)
        self.text(PDF_MARGEM_X, self.cursor_y, _texto_pdf(texto))
        self.cursor_y += passo

    def separador(self):
        self.set_line_width(0.5)
        self.set_draw_color(0, 0, 0)
        y = self.cursor_y - 5
        self.line(PDF_MARGEM_X, y, PDF_LARGURA_LINHA, y)
        self.cursor_y = y + 20

    def quebrar_texto(self, texto: str, largura: float) -> List[str]:
        """
        Quebra o texto em linhas que cabem na largura, com a fonte atual.

        Palavras maiores que a largura ficam sozinhas na linha.
        """
        linhas = []
        atual = ""
        for palavra in _texto_pdf(texto).split():
            candidata = f"{atual} {palavra}" if atual else palavra
            if atual and self.get_string_width(candidata) > largura:
                linhas.append(atual)
                atual = palavra
            else:
                atual = candidata
        if atual:
            linhas.append(atual)
        return linhas


def _linhas_identificacao(relatorio: Relatorio, insights: Insights) -> List[str]:
    periodo = f"Período: {relatorio.periodo.rotulo}"

    if isinstance(relatorio, RelatorioCliente):
        return [
            f"Cliente: {relatorio.nome_cliente}",
            f"Lojas: {insights.total_lojas} em {insights.total_marketplaces} marketplace(s)",
            f"CNPJs: {insights.total_cnpjs}",
            periodo,
        ]

    loja = relatorio.loja
    return [
        f"Cliente: {relatorio.nome_cliente}",
        f"Loja: {loja.get('nome', '')}",
        f"Marketplace: {rotulo_marketplace(loja.get('marketplace', ''))}",
        periodo,
    ]


def _linhas_metricas(relatorio: Relatorio, insights: Insights) -> List[str]:
    linhas = [
        f"Total de Vendas: {formatar_moeda(insights.total_vendas)}",
        f"Unidades Vendidas: {insights.total_itens}",
        f"Investimento em Ads: {formatar_moeda(insights.total_ads)}",
    ]

    if insights.roas_media > 0:
        linhas += [
            f"ROAS Médio: {formatar_decimal(insights.roas_media, 2)}",
            f"ACOS Médio: {formatar_decimal(insights.acos_media * 100, 1)}%",
        ]

    if insights.tem_comparacao and relatorio.comparacao is not None:
        linhas += [
            f"Comparação vs {relatorio.comparacao.rotulo}:",
            f"Crescimento em Vendas: {formatar_percentual(insights.crescimento_vendas)}",
            f"Crescimento em Unidades: {formatar_percentual(insights.crescimento_itens or 0)}",
            f"Variação em Ads: {formatar_percentual(insights.crescimento_ads or 0)}",
        ]

    return linhas


def _secao_lojas(pdf: RelatorioPDF, insights: InsightsConsolidados):
    if not insights.lojas_breakdown:
        return

    pdf.cursor_y += 10
    pdf.escrever("Desempenho por Loja", 16, PDF_COR_METRICAS, 12)

    for resumo in insights.lojas_breakdown:
        pdf.escrever(
            f"{rotulo_marketplace(resumo.marketplace)} - {resumo.nome}: "
            f"{formatar_moeda(resumo.vendas)} | Ads {formatar_moeda(resumo.ads)} | "
            f"{resumo.itens} un. | ROAS {formatar_decimal(resumo.roas, 2)}",
            10, PDF_COR_TEXTO, 8
        )

    melhor = insights.melhor_loja
    pdf.cursor_y += 4
    pdf.escrever(
        f"Maior faturamento: {melhor.nome} ({formatar_moeda(melhor.vendas)})",
        12, PDF_COR_TEXTO, 8
    )
    if insights.melhor_roas is not None and insights.melhor_roas.roas > 0:
        pdf.escrever(
            f"Melhor ROAS: {insights.melhor_roas.nome} "
            f"({formatar_decimal(insights.melhor_roas.roas, 2)})",
            12, PDF_COR_TEXTO, 8
        )


def _secao_recomendacoes(pdf: RelatorioPDF, insights: Insights):
    pdf.set_font(PDF_FONTE, size=10)
    linhas = pdf.quebrar_texto(insights.recomendacao, PDF_LARGURA_TEXTO)
    rotulo_tendencia = TENDENCIA_ROTULOS[insights.tendencia].split(" ", 1)[-1]

    y = max(pdf.cursor_y + 10, Y_RECOMENDACOES)
    altura = 15 + 5 * (len(linhas) + 1)
    if y + altura > PDF_LIMITE_Y + 5:
        pdf.nova_pagina()
    else:
        pdf.cursor_y = y

    pdf.escrever("Insights e Recomendações", 16, PDF_COR_INSIGHTS, 15)
    for linha in linhas:
        pdf.escrever(linha, 10, PDF_COR_TEXTO, 5)
    pdf.escrever(f"Tendência: {rotulo_tendencia}", 10, PDF_COR_TEXTO, 5)


def gerar_pdf(
    relatorio: Relatorio,
    insights: Insights,
    gerado_em: Optional[datetime] = None
) -> bytes:
    """
    Gera o relatorio em PDF.

    Serve para o relatorio de loja e para o consolidado do cliente; o
    consolidado inclui a secao de desempenho por loja.

    Args:
        relatorio: RelatorioLoja ou RelatorioCliente
        insights: Insights calculados para o relatorio
        gerado_em: Data/hora do rodape (padrao: agora)

    Returns:
        Bytes do arquivo PDF
    """
    consolidado = isinstance(relatorio, RelatorioCliente)
    pdf = RelatorioPDF(f"Relatório gerado em {formatar_data_geracao(gerado_em)}")
    pdf.nova_pagina()

    titulo = "Relatório Consolidado de Vendas" if consolidado else "Relatório Analítico de Vendas"
    pdf.escrever(titulo, 20, PDF_COR_TEXTO, 20)

    for linha in _linhas_identificacao(relatorio, insights):
        pdf.escrever(linha, 14, PDF_COR_TEXTO, 15)

    pdf.separador()

    pdf.escrever("Resumo do Desempenho", 16, PDF_COR_METRICAS, 20)
    for linha in _linhas_metricas(relatorio, insights):
        pdf.escrever(linha, 12, PDF_COR_TEXTO, 15)

    if consolidado and isinstance(insights, InsightsConsolidados):
        _secao_lojas(pdf, insights)

    _secao_recomendacoes(pdf, insights)

    logger.debug("PDF gerado para %s com %s pagina(s)", relatorio.nome_cliente, pdf.page)

    return bytes(pdf.output())
