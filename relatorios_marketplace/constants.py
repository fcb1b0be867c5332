"""
constants.py - Constantes e configuracoes do projeto Relatorios Marketplace.

Define nomes de colunas padronizados, marketplaces suportados, limiares
de tendencia/ROAS e textos usados nos relatorios para garantir
consistencia em todo o projeto.
"""

from types import MappingProxyType

# =============================================================================
# COLUNAS DOS DADOS MENSAIS (tabela dados_mensais)
# =============================================================================
COL_ID = "id"
COL_LOJA_ID = "loja_id"
COL_MES = "mes"
COL_ANO = "ano"
COL_FATURAMENTO = "faturamento_bruto"
COL_INVESTIMENTO = "investimento_ads"
COL_ITENS = "itens_vendidos"
COL_TIPO_CAMPANHA = "tipo_campanha"
COL_ROAS = "roas"
COL_ACOS = "acos"
COL_OBSERVACOES = "observacoes"
COL_CRIADO_EM = "created_at"
COL_ATUALIZADO_EM = "updated_at"

DADOS_REQUIRED_COLUMNS = [
    COL_MES,
    COL_ANO,
    COL_FATURAMENTO,
    COL_INVESTIMENTO,
    COL_ITENS,
]

# Colunas opcionais (criadas vazias quando ausentes)
DADOS_OPTIONAL_COLUMNS = [
    COL_ID,
    COL_LOJA_ID,
    COL_TIPO_CAMPANHA,
    COL_ROAS,
    COL_ACOS,
    COL_OBSERVACOES,
    COL_CRIADO_EM,
    COL_ATUALIZADO_EM,
]

# =============================================================================
# TABELAS DO BANCO
# =============================================================================
TABELA_CLIENTES = "clientes"
TABELA_CNPJS = "cnpjs"
TABELA_LOJAS = "lojas"
TABELA_DADOS_MENSAIS = "dados_mensais"

# =============================================================================
# TIPOS DE CAMPANHA
# =============================================================================
CAMPANHA_ORGANICA = "organica"
CAMPANHA_PAGA = "paga"
CAMPANHA_AMBAS = "ambas"

TIPOS_CAMPANHA = (CAMPANHA_ORGANICA, CAMPANHA_PAGA, CAMPANHA_AMBAS)

# =============================================================================
# MARKETPLACES
# =============================================================================
MARKETPLACE_OUTROS = "outros"

# Rotulo de exibicao por marketplace (somente leitura)
MARKETPLACE_LABELS = MappingProxyType({
    "shopee": "Shopee",
    "mercado_livre": "Mercado Livre",
    "tiktok_shop": "TikTok Shop",
    "shein": "Shein",
    "magalu": "Magalu",
    "amazon": "Amazon",
    MARKETPLACE_OUTROS: "Outros",
})

MARKETPLACES = tuple(MARKETPLACE_LABELS.keys())

# =============================================================================
# CALENDARIO
# =============================================================================
MESES = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)

# =============================================================================
# TENDENCIA E LIMIARES
# =============================================================================
TENDENCIA_ALTA = "alta"
TENDENCIA_BAIXA = "baixa"
TENDENCIA_ESTAVEL = "estavel"

TENDENCIA_ROTULOS = MappingProxyType({
    TENDENCIA_ALTA: "📈 ALTA",
    TENDENCIA_BAIXA: "📉 BAIXA",
    TENDENCIA_ESTAVEL: "➡️ ESTÁVEL",
})

# Variacao de vendas (%) que muda a tendencia
LIMIAR_TENDENCIA_LOJA = 5
LIMIAR_TENDENCIA_CLIENTE = 10

# ROAS medio que sobrescreve a recomendacao de crescimento
ROAS_ALTO = 4
ROAS_BAIXO = 2

# Quantidade de lojas listadas no relatorio consolidado
TOP_LOJAS_RELATORIO = 5

# =============================================================================
# RECOMENDACOES
# =============================================================================
RECOMENDACOES_LOJA = MappingProxyType({
    "padrao": "Mantenha o bom trabalho!",
    "alta": "Excelente crescimento! Continue investindo nesta estratégia.",
    "baixa": "Performance em declínio. Considere revisar a estratégia de marketing.",
    "roas_alto": "ROAS excelente! Considere aumentar o investimento em Ads.",
    "roas_baixo": "ROAS baixo. Revise palavras-chave e segmentação dos anúncios.",
})

RECOMENDACOES_CLIENTE = MappingProxyType({
    "padrao": "Mantenha o bom trabalho em todas as lojas!",
    "alta": "Excelente crescimento do portfólio! Continue investindo nas estratégias atuais.",
    "baixa": "Portfólio em declínio. Revise a estratégia de marketing das lojas com queda.",
    "roas_alto": "ROAS consolidado excelente! Considere aumentar o investimento em Ads nas lojas de melhor desempenho.",
    "roas_baixo": "ROAS consolidado baixo. Revise palavras-chave e segmentação nas lojas com menor retorno.",
})

# =============================================================================
# LAYOUT DO PDF (unidades em mm, pagina A4)
# =============================================================================
PDF_MARGEM_X = 20
PDF_LARGURA_LINHA = 190
PDF_LARGURA_TEXTO = 150
PDF_LIMITE_Y = 270
PDF_RODAPE_Y = 280

PDF_COR_TEXTO = (51, 51, 51)
PDF_COR_METRICAS = (0, 100, 200)
PDF_COR_INSIGHTS = (0, 150, 0)
PDF_COR_RODAPE = (128, 128, 128)

PDF_FONTE = "Helvetica"

# =============================================================================
# TEXTOS DA INTERFACE
# =============================================================================
APP_TITLE = "Relatórios Marketplace"
APP_SUBTITLE = "Insights mensais por loja e consolidados por cliente"
APP_ICON = ":bar_chart:"

TAB_LOJA = "Relatório por Loja"
TAB_CLIENTE = "Relatório Consolidado"
TAB_DASHBOARD = "Dashboard"

# =============================================================================
# FORMATACAO
# =============================================================================
FORMATO_DATA_GERACAO = "%d/%m/%Y às %H:%M"
PREFIXO_RELATORIO_LOJA = "relatorio"
PREFIXO_RELATORIO_CLIENTE = "relatorio-consolidado"
