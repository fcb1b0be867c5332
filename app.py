"""
app.py - Interface principal Streamlit para Relatorios Marketplace.

Gera relatorios mensais por loja e consolidados por cliente a partir dos
dados cadastrados no Supabase, com previa dos insights, texto pronto
para WhatsApp e download em PDF/Excel.

Autor: Relatorios Marketplace
"""

import logging

import streamlit as st
import pandas as pd

# Importar modulos do projeto
from relatorios_marketplace.constants import (
    APP_TITLE,
    APP_SUBTITLE,
    APP_ICON,
    TAB_LOJA,
    TAB_CLIENTE,
    TAB_DASHBOARD,
    MESES,
    TENDENCIA_ROTULOS,
)
from relatorios_marketplace.formatacao import (
    formatar_valor,
    formatar_moeda,
    rotulo_marketplace,
)
from relatorios_marketplace.io import DataValidationError
from relatorios_marketplace.modelos import Periodo
from relatorios_marketplace.repositorio import Repositorio, RepositorioError
from relatorios_marketplace.transform import (
    calcular_insights,
    calcular_insights_cliente,
    calcular_resumo_geral,
    calcular_serie_mensal,
    calcular_faturamento_por_marketplace,
)
from relatorios_marketplace.reports import (
    gerar_relatorio_whatsapp,
    gerar_resumo_metricas,
)
from relatorios_marketplace.pdf import gerar_pdf
from relatorios_marketplace.export import (
    tabela_breakdown,
    exportar_csv,
    exportar_excel,
    gerar_nome_arquivo_relatorio,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURACAO DA PAGINA
# =============================================================================
st.set_page_config(
    page_title=APP_TITLE,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

MIME_EXCEL = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# =============================================================================
# FUNCOES DE CACHE
# =============================================================================
@st.cache_resource(show_spinner=False)
def obter_repositorio() -> Repositorio:
    return Repositorio()


@st.cache_data(show_spinner=False, ttl=300)
def carregar_cadastros(_repo: Repositorio):
    """
    Carrega clientes e lojas ativas com cache de 5 minutos.

    Returns:
        Tupla (clientes, lojas)
    """
    return _repo.buscar_clientes(), _repo.buscar_lojas_ativas()


@st.cache_data(show_spinner=False, ttl=300)
def carregar_dashboard(_repo: Repositorio):
    """
    Carrega os dados do dashboard com cache de 5 minutos.

    Returns:
        Dicionario com resumo, serie mensal e faturamento por marketplace
    """
    clientes = _repo.buscar_clientes()
    # Inclui lojas inativas: os dados mensais cobrem todas as lojas
    lojas = _repo.buscar_lojas()
    dados = _repo.buscar_dados_mensais()

    return {
        'resumo': calcular_resumo_geral(clientes, _repo.buscar_cnpjs(), lojas, dados),
        'serie': calcular_serie_mensal(dados),
        'marketplaces': calcular_faturamento_por_marketplace(dados, lojas),
    }


# =============================================================================
# COMPONENTES
# =============================================================================
def selecionar_periodos(chave: str):
    """
    Seletores de periodo do relatorio e de comparacao (opcional).

    Returns:
        Tupla (periodo, comparacao ou None)
    """
    anos = [pd.Timestamp.now().year - i for i in range(5)]

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        mes = st.selectbox("Mês", range(1, 13), format_func=lambda m: MESES[m - 1], key=f"{chave}_mes")
    with col2:
        ano = st.selectbox("Ano", anos, key=f"{chave}_ano")
    with col3:
        comp_mes = st.selectbox(
            "Comparar com (mês)", [None] + list(range(1, 13)),
            format_func=lambda m: "-" if m is None else MESES[m - 1],
            key=f"{chave}_comp_mes"
        )
    with col4:
        comp_ano = st.selectbox(
            "Comparar com (ano)", [None] + anos,
            format_func=lambda a: "-" if a is None else str(a),
            key=f"{chave}_comp_ano"
        )

    comparacao = Periodo(comp_mes, comp_ano) if comp_mes and comp_ano else None
    return Periodo(mes, ano), comparacao


def relatorio_em_sessao(chave: str, selecao: tuple):
    """Relatorio guardado na sessao; descartado quando a selecao mudou."""
    relatorio = st.session_state.get(chave)
    if relatorio is not None and relatorio.selecao != selecao:
        del st.session_state[chave]
        return None
    return relatorio


def exibir_previa(insights):
    """Exibe os cards de metricas, tendencia e recomendacao."""
    cards = gerar_resumo_metricas(insights)

    for inicio in range(0, len(cards), 4):
        colunas = st.columns(4)
        for col, card in zip(colunas, cards[inicio:inicio + 4]):
            with col:
                st.metric(
                    label=f"{card['icone']} {card['label']}",
                    value=formatar_valor(card['valor'], card['formato'])
                )

    st.markdown(f"**Tendência:** {TENDENCIA_ROTULOS[insights.tendencia]}")
    st.info(f":bulb: {insights.recomendacao}")


def exibir_exportacao(relatorio, insights, nome: str, consolidado: bool):
    """Texto para WhatsApp e botoes de download."""
    st.subheader(":speech_balloon: Texto para WhatsApp")
    st.code(gerar_relatorio_whatsapp(relatorio, insights), language=None)

    st.download_button(
        ":arrow_down: PDF",
        data=gerar_pdf(relatorio, insights),
        file_name=gerar_nome_arquivo_relatorio(nome, relatorio.periodo, consolidado),
        mime="application/pdf",
        key=f"pdf_{consolidado}"
    )


# =============================================================================
# INTERFACE PRINCIPAL
# =============================================================================
def main():
    # Header
    st.title(f"{APP_ICON} {APP_TITLE}")
    st.markdown(f"*{APP_SUBTITLE}*")
    st.markdown("---")

    try:
        repo = obter_repositorio()
        clientes, lojas = carregar_cadastros(repo)
    except RepositorioError as e:
        st.error(f":x: Erro ao conectar ao banco: {str(e)}")
        return

    tab_loja, tab_cliente, tab_dashboard = st.tabs([
        f":convenience_store: {TAB_LOJA}",
        f":office: {TAB_CLIENTE}",
        f":bar_chart: {TAB_DASHBOARD}",
    ])

    # ==========================================================================
    # TAB: RELATORIO POR LOJA
    # ==========================================================================
    with tab_loja:
        if not lojas:
            st.info("Nenhuma loja ativa cadastrada.")
        else:
            loja = st.selectbox(
                "Loja",
                lojas,
                format_func=lambda l: f"{l['nome']} ({rotulo_marketplace(l['marketplace'])})",
                key="loja"
            )
            periodo, comparacao = selecionar_periodos("loja")

            if st.button(":gear: Gerar relatório", key="gerar_loja", type="primary"):
                try:
                    with st.spinner("Gerando relatório..."):
                        st.session_state['relatorio_loja'] = repo.carregar_relatorio_loja(
                            loja, periodo, comparacao
                        )
                except (RepositorioError, DataValidationError) as e:
                    st.error(f":x: Erro ao gerar relatório: {str(e)}")

            relatorio = relatorio_em_sessao('relatorio_loja', (loja.get('id'), periodo, comparacao))
            if relatorio is not None:
                insights = calcular_insights(relatorio)
                exibir_previa(insights)
                st.markdown("---")
                exibir_exportacao(relatorio, insights, relatorio.loja['nome'], consolidado=False)

    # ==========================================================================
    # TAB: RELATORIO CONSOLIDADO
    # ==========================================================================
    with tab_cliente:
        if not clientes:
            st.info("Nenhum cliente cadastrado.")
        else:
            cliente = st.selectbox("Cliente", clientes, format_func=lambda c: c['nome'], key="cliente")
            periodo, comparacao = selecionar_periodos("cliente")

            if st.button(":gear: Gerar relatório consolidado", key="gerar_cliente", type="primary"):
                try:
                    with st.spinner("Gerando relatório consolidado..."):
                        st.session_state['relatorio_cliente'] = repo.carregar_relatorio_cliente(
                            cliente, periodo, comparacao
                        )
                except (RepositorioError, DataValidationError) as e:
                    st.error(f":x: Erro ao gerar relatório: {str(e)}")

            relatorio = relatorio_em_sessao('relatorio_cliente', (cliente.get('id'), periodo, comparacao))
            if relatorio is not None:
                st.caption(f"{len(relatorio.lojas)} loja(s) encontrada(s)")
                insights = calcular_insights_cliente(relatorio)
                exibir_previa(insights)

                if insights.melhor_loja is not None:
                    st.success(
                        f":trophy: Melhor loja: **{insights.melhor_loja.nome}** "
                        f"({formatar_moeda(insights.melhor_loja.vendas)})"
                    )

                df_lojas = tabela_breakdown(insights)
                if not df_lojas.empty:
                    st.subheader(":convenience_store: Desempenho por Loja")
                    st.dataframe(df_lojas, use_container_width=True, hide_index=True)

                    col_dl1, col_dl2, col_dl3 = st.columns([1, 1, 2])
                    with col_dl1:
                        st.download_button(
                            ":arrow_down: CSV",
                            data=exportar_csv(df_lojas),
                            file_name=gerar_nome_arquivo_relatorio(
                                relatorio.nome_cliente, relatorio.periodo, True, "csv"
                            ),
                            mime="text/csv"
                        )
                    with col_dl2:
                        st.download_button(
                            ":arrow_down: Excel",
                            data=exportar_excel(df_lojas),
                            file_name=gerar_nome_arquivo_relatorio(
                                relatorio.nome_cliente, relatorio.periodo, True, "xlsx"
                            ),
                            mime=MIME_EXCEL
                        )

                st.markdown("---")
                exibir_exportacao(relatorio, insights, relatorio.nome_cliente, consolidado=True)

    # ==========================================================================
    # TAB: DASHBOARD
    # ==========================================================================
    with tab_dashboard:
        try:
            dashboard = carregar_dashboard(repo)
        except (RepositorioError, DataValidationError) as e:
            st.error(f":x: Erro ao carregar dashboard: {str(e)}")
            return

        resumo = dashboard['resumo']
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Clientes", resumo['clientes'])
        with col2:
            st.metric("Lojas", resumo['lojas'])
        with col3:
            st.metric("Faturamento Total", formatar_moeda(resumo['total_faturamento']))
        with col4:
            st.metric("ROAS Global", formatar_valor(resumo['roas_global'], 'decimal'))

        serie = dashboard['serie']
        if not serie.empty:
            st.subheader(":chart_with_upwards_trend: Evolução Mensal")
            st.line_chart(serie.set_index('periodo')[['faturamento', 'investimento']])

        marketplaces = dashboard['marketplaces']
        if not marketplaces.empty:
            st.subheader(":globe_with_meridians: Faturamento por Marketplace")
            marketplaces = marketplaces.assign(
                marketplace=marketplaces['marketplace'].map(rotulo_marketplace)
            )
            st.bar_chart(marketplaces.set_index('marketplace')['faturamento'])


# =============================================================================
# EXECUCAO
# =============================================================================
if __name__ == "__main__":
    main()
