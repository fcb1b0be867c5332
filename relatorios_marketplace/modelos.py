"""
modelos.py - Estruturas de dados dos relatorios.

Periodos, contextos de relatorio (loja ou cliente) e os insights
derivados. Os insights nunca sao persistidos: sao recalculados a cada
geracao de relatorio.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from .constants import (
    TENDENCIA_ESTAVEL,
    RECOMENDACOES_LOJA,
)
from .formatacao import nome_mes
from .io import DataValidationError


@dataclass(frozen=True)
class Periodo:
    """Janela de relatorio identificada por (mes, ano)."""

    mes: int
    ano: int

    def __post_init__(self):
        if not 1 <= int(self.mes) <= 12:
            raise DataValidationError(f"Mes invalido: {self.mes}. Use valores de 1 a 12")
        if int(self.ano) < 1:
            raise DataValidationError(f"Ano invalido: {self.ano}")

    @property
    def nome_mes(self) -> str:
        return nome_mes(self.mes)

    @property
    def rotulo(self) -> str:
        return f"{self.nome_mes} {self.ano}"


@dataclass
class ResumoLoja:
    """Linha do breakdown por loja do relatorio consolidado."""

    id: str
    nome: str
    marketplace: str
    cnpj: str
    vendas: float
    ads: float
    itens: int
    roas: float


@dataclass
class Insights:
    total_vendas: float = 0.0
    total_ads: float = 0.0
    total_itens: int = 0
    roas_media: float = 0.0
    acos_media: float = 0.0
    # Definidos apenas quando ha dados no periodo de comparacao
    crescimento_vendas: Optional[float] = None
    crescimento_itens: Optional[float] = None
    crescimento_ads: Optional[float] = None
    tendencia: str = TENDENCIA_ESTAVEL
    recomendacao: str = RECOMENDACOES_LOJA["padrao"]

    @property
    def tem_comparacao(self) -> bool:
        return self.crescimento_vendas is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InsightsConsolidados(Insights):
    total_cnpjs: int = 0
    total_lojas: int = 0
    total_marketplaces: int = 0
    lojas_breakdown: List[ResumoLoja] = field(default_factory=list)
    melhor_loja: Optional[ResumoLoja] = None
    melhor_roas: Optional[ResumoLoja] = None


@dataclass
class RelatorioLoja:
    """
    Contexto do relatorio de uma loja.

    `loja` segue o formato retornado pelo banco, com o CNPJ e o cliente
    aninhados: {'id', 'nome', 'marketplace', 'cnpj': {..., 'cliente': {...}}}.
    `dados` sao as linhas mensais da loja, sem filtro de periodo.
    """

    loja: Dict[str, Any]
    dados: Union[List[Dict[str, Any]], pd.DataFrame]
    periodo: Periodo
    comparacao: Optional[Periodo] = None

    @property
    def selecao(self) -> Tuple[Any, Periodo, Optional[Periodo]]:
        """Loja e periodos que geraram o relatorio."""
        return (self.loja.get('id'), self.periodo, self.comparacao)

    @property
    def nome_cliente(self) -> str:
        cnpj = self.loja.get('cnpj') or {}
        cliente = cnpj.get('cliente') or {}
        return cliente.get('nome', '')


@dataclass
class RelatorioCliente:
    """
    Contexto do relatorio consolidado de um cliente.

    Cada loja de `lojas` carrega suas linhas mensais em 'dados_mensais'.
    """

    cliente: Dict[str, Any]
    lojas: List[Dict[str, Any]]
    periodo: Periodo
    comparacao: Optional[Periodo] = None

    @property
    def selecao(self) -> Tuple[Any, Periodo, Optional[Periodo]]:
        """Cliente e periodos que geraram o relatorio."""
        return (self.cliente.get('id'), self.periodo, self.comparacao)

    @property
    def nome_cliente(self) -> str:
        return self.cliente.get('nome', '')
