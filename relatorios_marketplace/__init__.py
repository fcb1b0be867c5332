"""
relatorios_marketplace - Modulo principal dos Relatorios Marketplace.

Este pacote contem os modulos de geracao de relatorios:
- constants: Constantes e configuracoes
- formatacao: Moeda, percentuais e datas
- io: Leitura e validacao de dados mensais
- modelos: Periodos, contextos e insights
- transform: Insights por loja/cliente e metricas do dashboard
- reports: Relatorio em texto (WhatsApp)
- pdf: Relatorio em PDF
- export: Exportacao de dados
- repositorio: Acesso ao Supabase (importado sob demanda)
"""

from .constants import *
from .formatacao import (
    formatar_moeda,
    formatar_percentual,
    formatar_decimal,
    formatar_valor,
    nome_mes,
    ultimo_dia_mes,
    rotulo_marketplace,
    formatar_data_geracao,
)
from .io import (
    ler_arquivo,
    validar_colunas,
    calcular_roas_acos,
    dados_para_dataframe,
    processar_dados_mensais,
    montar_lojas_consolidadas,
    DataValidationError,
)
from .modelos import (
    Periodo,
    Insights,
    InsightsConsolidados,
    ResumoLoja,
    RelatorioLoja,
    RelatorioCliente,
)
from .transform import (
    filtrar_periodo,
    agregar_periodo,
    calcular_crescimento,
    calcular_insights,
    calcular_insights_cliente,
    top_lojas_por_vendas,
    calcular_resumo_geral,
    calcular_serie_mensal,
    calcular_faturamento_por_marketplace,
)
from .reports import (
    gerar_relatorio_whatsapp,
    gerar_resumo_metricas,
)
from .pdf import gerar_pdf
from .export import (
    tabela_breakdown,
    exportar_csv,
    exportar_excel,
    gerar_nome_arquivo_relatorio,
)
