"""
repositorio.py - Acesso aos dados no Supabase.

Busca clientes, lojas e dados mensais e monta os contextos de relatorio.
Credenciais vem de SUPABASE_URL / SUPABASE_KEY (ambiente ou .env).
"""

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from postgrest import APIError
from supabase import Client, create_client

from .constants import (
    TABELA_CLIENTES,
    TABELA_CNPJS,
    TABELA_LOJAS,
    TABELA_DADOS_MENSAIS,
    COL_ID,
    COL_LOJA_ID,
    COL_MES,
    COL_ANO,
)
from .io import montar_lojas_consolidadas
from .modelos import Periodo, RelatorioLoja, RelatorioCliente

logger = logging.getLogger(__name__)

SELECT_LOJA = """
    id,
    nome,
    marketplace,
    url,
    ativa,
    cnpj:cnpjs!inner (
        id,
        cnpj,
        nome_fantasia,
        razao_social,
        cliente:clientes!inner (
            id,
            nome
        )
    )
"""

PAGINA = 1000


class RepositorioError(Exception):
    """Falha ao consultar o banco de dados."""
    pass


def criar_cliente_supabase() -> Client:
    """
    Cria o cliente Supabase a partir das variaveis de ambiente.

    Raises:
        RepositorioError: Se SUPABASE_URL/SUPABASE_KEY nao estiverem configurados
    """
    if (env := find_dotenv(usecwd=True)):
        load_dotenv(env)

    url, key = os.getenv("SUPABASE_URL", ""), os.getenv("SUPABASE_KEY", "")
    if not (url and key):
        raise RepositorioError("SUPABASE_URL e SUPABASE_KEY devem estar configurados")

    cliente = create_client(url, key)
    logger.info("Cliente Supabase inicializado.")
    return cliente


class Repositorio:
    """Consultas usadas pela geracao de relatorios e pelo dashboard."""

    def __init__(self, cliente: Optional[Client] = None):
        self.cliente = cliente or criar_cliente_supabase()

    def _executar(self, tabela: str, consulta) -> List[Dict[str, Any]]:
        try:
            resp = consulta.execute()
        except APIError as err:
            logger.error("[%s] erro na consulta: %s", tabela, err.message)
            raise RepositorioError(f"Erro ao consultar {tabela}: {err.message}") from err

        dados = resp.data or []
        logger.info("[%s] %s linhas", tabela, len(dados))
        return dados

    def _buscar_tudo(
        self,
        tabela: str,
        colunas: str = "*",
        filtros: Optional[Dict[str, Any]] = None,
        ordem: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        # Paginacao para tabelas maiores que o limite da API
        linhas, pagina = [], 0
        while True:
            inicio, fim = pagina * PAGINA, (pagina + 1) * PAGINA - 1
            consulta = self.cliente.table(tabela).select(colunas)
            for coluna, valor in (filtros or {}).items():
                consulta = consulta.eq(coluna, valor)
            if ordem:
                consulta = consulta.order(ordem)
            dados = self._executar(tabela, consulta.range(inicio, fim))
            linhas.extend(dados)
            if len(dados) < PAGINA:
                return linhas
            pagina += 1

    def buscar_clientes(self) -> List[Dict[str, Any]]:
        return self._buscar_tudo(TABELA_CLIENTES, ordem="nome")

    def buscar_cnpjs(self) -> List[Dict[str, Any]]:
        return self._buscar_tudo(TABELA_CNPJS, "id")

    def buscar_lojas(self) -> List[Dict[str, Any]]:
        """Todas as lojas, ativas ou nao (id e marketplace), para o dashboard."""
        return self._buscar_tudo(TABELA_LOJAS, "id, marketplace")

    def buscar_lojas_ativas(self) -> List[Dict[str, Any]]:
        return self._buscar_tudo(TABELA_LOJAS, SELECT_LOJA, filtros={"ativa": True}, ordem="nome")

    def buscar_lojas_cliente(self, cliente_id: str) -> List[Dict[str, Any]]:
        """Lojas ativas de um cliente, com CNPJ e cliente aninhados."""
        return self._buscar_tudo(
            TABELA_LOJAS,
            SELECT_LOJA,
            filtros={"cnpj.cliente.id": cliente_id, "ativa": True},
        )

    def buscar_dados_mensais(self, loja_ids: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """
        Dados mensais das lojas informadas, do mais recente ao mais antigo.

        Sem `loja_ids`, retorna os dados de todas as lojas.
        """
        if loja_ids is None:
            return self._buscar_tudo(TABELA_DADOS_MENSAIS)
        if not loja_ids:
            return []

        consulta = (
            self.cliente.table(TABELA_DADOS_MENSAIS)
            .select("*")
            .in_(COL_LOJA_ID, loja_ids)
            .order(COL_ANO, desc=True)
            .order(COL_MES, desc=True)
        )
        return self._executar(TABELA_DADOS_MENSAIS, consulta)

    def carregar_relatorio_loja(
        self,
        loja: Dict[str, Any],
        periodo: Periodo,
        comparacao: Optional[Periodo] = None
    ) -> RelatorioLoja:
        dados = self.buscar_dados_mensais([loja[COL_ID]])
        return RelatorioLoja(loja=loja, dados=dados, periodo=periodo, comparacao=comparacao)

    def carregar_relatorio_cliente(
        self,
        cliente: Dict[str, Any],
        periodo: Periodo,
        comparacao: Optional[Periodo] = None
    ) -> RelatorioCliente:
        lojas = self.buscar_lojas_cliente(cliente[COL_ID])
        dados = self.buscar_dados_mensais([loja[COL_ID] for loja in lojas])
        return RelatorioCliente(
            cliente=cliente,
            lojas=montar_lojas_consolidadas(lojas, dados),
            periodo=periodo,
            comparacao=comparacao,
        )
