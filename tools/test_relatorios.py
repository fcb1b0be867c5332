#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Testes do relatorio em texto (WhatsApp), dos cards de resumo e do PDF.

USO:
    pytest tools/test_relatorios.py
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Adicionar raiz do projeto ao path
sys.path.insert(0, str(Path(__file__).parent.parent))

from relatorios_marketplace.modelos import Periodo, RelatorioLoja, RelatorioCliente
from relatorios_marketplace.transform import calcular_insights, calcular_insights_cliente
from relatorios_marketplace.reports import gerar_relatorio_whatsapp, gerar_resumo_metricas
from relatorios_marketplace.pdf import gerar_pdf, RelatorioPDF

GERADO_EM = datetime(2024, 4, 2, 14, 30)


@pytest.fixture
def relatorio_loja():
    return RelatorioLoja(
        loja={
            'id': 'l1',
            'nome': 'Loja Centro',
            'marketplace': 'mercado_livre',
            'cnpj': {'id': 'c1', 'cliente': {'id': 'cli', 'nome': 'Cliente X'}},
        },
        dados=[
            {'mes': 3, 'ano': 2024, 'faturamento_bruto': 5000, 'investimento_ads': 1500,
             'itens_vendidos': 50, 'roas': 3.33, 'acos': 0.3},
            {'mes': 2, 'ano': 2024, 'faturamento_bruto': 4000, 'investimento_ads': 1500,
             'itens_vendidos': 40, 'roas': 2.67, 'acos': 0.375},
        ],
        periodo=Periodo(3, 2024),
        comparacao=Periodo(2, 2024),
    )


@pytest.fixture
def relatorio_cliente():
    return RelatorioCliente(
        cliente={'id': 'cli', 'nome': 'Cliente X'},
        lojas=[
            {'id': 'A', 'nome': 'Loja A', 'marketplace': 'shopee',
             'cnpj': {'id': 'c1', 'nome_fantasia': 'Fantasia'},
             'dados_mensais': [{'mes': 3, 'ano': 2024, 'faturamento_bruto': 10000,
                                'investimento_ads': 2000, 'itens_vendidos': 50, 'roas': 5.0}]},
            {'id': 'B', 'nome': 'Loja B', 'marketplace': 'tiktok_shop',
             'cnpj': {'id': 'c2', 'nome_fantasia': 'Outra'},
             'dados_mensais': [{'mes': 3, 'ano': 2024, 'faturamento_bruto': 3000,
                                'investimento_ads': 1500, 'itens_vendidos': 20, 'roas': 2.0}]},
        ],
        periodo=Periodo(3, 2024),
    )


# =============================================================================
# TEXTO
# =============================================================================
def test_texto_loja_completo(relatorio_loja):
    """Todas as secoes do relatorio de loja, na ordem."""
    insights = calcular_insights(relatorio_loja)
    texto = gerar_relatorio_whatsapp(relatorio_loja, insights, gerado_em=GERADO_EM)
    linhas = texto.split("\n")

    assert linhas[0] == "📊 Relatório de Vendas Cliente X - Março 2024"
    assert linhas[2] == "🗓️ Período: 01 a 31 de Março"
    assert "🌐 Canal: MERCADO LIVRE - LOJA CENTRO" in linhas
    assert "💰 Total de Vendas: R$ 5.000,00" in linhas
    assert "📦 Unidades Vendidas: 50" in linhas
    assert "📣 Investimento em Ads: R$ 1.500,00" in linhas
    assert "🎯 ROAS Médio: 3.33" in linhas
    assert "💸 ACOS Médio: 30.0%" in linhas
    assert "📈 Comparação vs Fevereiro 2024" in linhas
    assert "💰 Crescimento em Vendas: +25.0%" in linhas
    assert "📣 Variação em Ads: +0.0%" in linhas
    assert "💡 Insight: Excelente crescimento! Continue investindo nesta estratégia." in linhas
    assert "🏷️ Tendência: 📈 ALTA" in linhas
    assert linhas[-2] == "---"
    assert linhas[-1] == "Relatório gerado automaticamente em 02/04/2024 às 14:30"


def test_texto_sem_roas_e_sem_comparacao(relatorio_loja):
    relatorio_loja.comparacao = None
    relatorio_loja.dados = [
        {'mes': 3, 'ano': 2024, 'faturamento_bruto': 800, 'investimento_ads': 0,
         'itens_vendidos': 4},
    ]
    insights = calcular_insights(relatorio_loja)
    texto = gerar_relatorio_whatsapp(relatorio_loja, insights, gerado_em=GERADO_EM)

    assert "Métricas de Performance" not in texto
    assert "Comparação vs" not in texto
    assert "Destaques" not in texto
    assert "🏷️ Tendência: ➡️ ESTÁVEL" in texto


def test_texto_consolidado(relatorio_cliente):
    insights = calcular_insights_cliente(relatorio_cliente)
    texto = gerar_relatorio_whatsapp(relatorio_cliente, insights, gerado_em=GERADO_EM)
    linhas = texto.split("\n")

    assert linhas[0] == "📊 Relatório Consolidado Cliente X - Março 2024"
    assert "🏪 Lojas: 2 | Marketplaces: 2 | CNPJs: 2" in linhas
    # Lojas listadas da maior para a menor venda
    indice_a = linhas.index("🌐 SHOPEE - LOJA A: R$ 10.000,00")
    indice_b = linhas.index("🌐 TIKTOK SHOP - LOJA B: R$ 3.000,00")
    assert indice_a < indice_b
    assert "💰 Total de Vendas: R$ 13.000,00" in linhas
    assert "🎯 ROAS Médio: 3.50" in linhas
    assert "🥇 Maior faturamento: Loja A (R$ 10.000,00)" in linhas
    assert "🎯 Melhor ROAS: Loja A (5.00)" in linhas
    assert "💡 Insight: Mantenha o bom trabalho em todas as lojas!" in linhas


def test_texto_periodo_fevereiro_bissexto(relatorio_loja):
    relatorio_loja.periodo = Periodo(2, 2024)
    relatorio_loja.comparacao = None
    insights = calcular_insights(relatorio_loja)
    texto = gerar_relatorio_whatsapp(relatorio_loja, insights, gerado_em=GERADO_EM)

    assert "🗓️ Período: 01 a 29 de Fevereiro" in texto


# =============================================================================
# CARDS
# =============================================================================
def test_cards_loja(relatorio_loja):
    cards = gerar_resumo_metricas(calcular_insights(relatorio_loja))
    labels = [c['label'] for c in cards]

    assert labels == [
        'Total de Vendas', 'Unidades Vendidas', 'ROAS Médio',
        'Investimento em Ads', 'Crescimento em Vendas',
    ]
    assert cards[-1]['valor'] == 25.0
    assert cards[-1]['formato'] == 'percentual'


def test_cards_consolidado(relatorio_cliente):
    cards = gerar_resumo_metricas(calcular_insights_cliente(relatorio_cliente))
    por_label = {c['label']: c['valor'] for c in cards}

    assert por_label['CNPJs'] == 2
    assert por_label['Lojas'] == 2
    assert por_label['Marketplaces'] == 2
    assert 'Crescimento em Vendas' not in por_label


# =============================================================================
# PDF
# =============================================================================
def test_pdf_loja(relatorio_loja):
    """O PDF e gerado em memoria e devolvido como bytes."""
    conteudo = gerar_pdf(relatorio_loja, calcular_insights(relatorio_loja), gerado_em=GERADO_EM)

    assert isinstance(conteudo, bytes)
    assert conteudo.startswith(b"%PDF")


def test_pdf_consolidado(relatorio_cliente):
    conteudo = gerar_pdf(relatorio_cliente, calcular_insights_cliente(relatorio_cliente))

    assert conteudo.startswith(b"%PDF")


def test_pdf_muitas_lojas(relatorio_cliente):
    relatorio_cliente.lojas = [
        {'id': str(i), 'nome': f"Loja {i}", 'marketplace': 'shopee',
         'cnpj': {'id': 'c1', 'nome_fantasia': 'F'},
         'dados_mensais': [{'mes': 3, 'ano': 2024, 'faturamento_bruto': 100 + i,
                            'investimento_ads': 10, 'itens_vendidos': 1, 'roas': 3.0}]}
        for i in range(30)
    ]
    conteudo = gerar_pdf(relatorio_cliente, calcular_insights_cliente(relatorio_cliente))

    assert conteudo.startswith(b"%PDF")


def test_cursor_passa_do_limite_abre_nova_pagina():
    pdf = RelatorioPDF("rodape")
    pdf.nova_pagina()

    for i in range(40):
        pdf.escrever(f"Linha {i}", 10, (0, 0, 0), 8)

    assert pdf.page >= 2
    assert pdf.cursor_y <= 270 + 8


def test_quebra_de_texto_respeita_largura():
    pdf = RelatorioPDF("rodape")
    pdf.nova_pagina()
    pdf.set_font("Helvetica", size=10)
    texto = "ROAS excelente! Considere aumentar o investimento em Ads. " * 4

    linhas = pdf.quebrar_texto(texto, 60)

    assert len(linhas) > 1
    assert all(pdf.get_string_width(l) <= 60 for l in linhas)
    assert " ".join(linhas) == " ".join(texto.split())


# =============================================================================
# SELECAO
# =============================================================================
def test_selecao_identifica_loja_e_periodos(relatorio_loja):
    """Um relatorio so vale para a loja e os periodos que o geraram."""
    assert relatorio_loja.selecao == ('l1', Periodo(3, 2024), Periodo(2, 2024))
    assert relatorio_loja.selecao != ('l1', Periodo(4, 2024), Periodo(2, 2024))
    assert relatorio_loja.selecao != ('l1', Periodo(3, 2024), None)
    assert relatorio_loja.selecao != ('l2', Periodo(3, 2024), Periodo(2, 2024))


def test_selecao_identifica_cliente_e_periodos(relatorio_cliente):
    assert relatorio_cliente.selecao == ('cli', Periodo(3, 2024), None)
    assert relatorio_cliente.selecao != ('outro', Periodo(3, 2024), None)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
