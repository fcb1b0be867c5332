#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Gera o relatorio de uma loja (ou consolidado) a partir de uma planilha
de dados mensais, sem acessar o banco.

USO:
    python tools/gerar_relatorio.py --input dados.csv --mes 3 --ano 2024 \
        --cliente "Cliente X" --loja "Loja Centro" --marketplace shopee

    python tools/gerar_relatorio.py --input dados.xlsx --mes 3 --ano 2024 \
        --comparar-mes 2 --comparar-ano 2024 --cliente "Cliente X" \
        --consolidado --pdf relatorio.pdf

No modo consolidado a planilha precisa da coluna loja_id; as colunas
opcionais loja_nome, marketplace e cnpj_id identificam cada loja.
"""

import argparse
import logging
import sys
from pathlib import Path
from io import BytesIO

import pandas as pd

# Adicionar raiz do projeto ao path
sys.path.insert(0, str(Path(__file__).parent.parent))

from relatorios_marketplace.constants import COL_ID, COL_LOJA_ID, MARKETPLACE_OUTROS, MARKETPLACES
from relatorios_marketplace.io import ler_arquivo, processar_dados_mensais, DataValidationError
from relatorios_marketplace.modelos import Periodo, RelatorioLoja, RelatorioCliente
from relatorios_marketplace.transform import calcular_insights, calcular_insights_cliente
from relatorios_marketplace.reports import gerar_relatorio_whatsapp
from relatorios_marketplace.pdf import gerar_pdf

logger = logging.getLogger("gerar_relatorio")


def _valor(linha: pd.Series, coluna: str, padrao=None):
    valor = linha.get(coluna)
    return valor if valor is not None and pd.notna(valor) else padrao


def montar_lojas(df: pd.DataFrame) -> list:
    """Monta as lojas (formato do banco) a partir das colunas da planilha."""
    lojas = []
    for loja_id, grupo in df.groupby(COL_LOJA_ID, sort=False):
        primeira = grupo.iloc[0]
        lojas.append({
            COL_ID: loja_id,
            'nome': str(_valor(primeira, 'loja_nome', loja_id)),
            'marketplace': str(_valor(primeira, 'marketplace', MARKETPLACE_OUTROS)),
            'cnpj': {'id': _valor(primeira, 'cnpj_id'), 'nome_fantasia': ''},
            'dados_mensais': grupo.to_dict('records'),
        })
    return lojas


def main():
    ap = argparse.ArgumentParser(description="Gera relatorio de vendas de marketplace")
    ap.add_argument("--input", required=True, help="Planilha .csv ou .xlsx com dados mensais")
    ap.add_argument("--mes", type=int, required=True)
    ap.add_argument("--ano", type=int, required=True)
    ap.add_argument("--comparar-mes", type=int)
    ap.add_argument("--comparar-ano", type=int)
    ap.add_argument("--cliente", default="")
    ap.add_argument("--loja", default="")
    ap.add_argument("--marketplace", default=MARKETPLACE_OUTROS, choices=MARKETPLACES)
    ap.add_argument("--consolidado", action="store_true", help="Consolida todas as lojas da planilha")
    ap.add_argument("--pdf", help="Caminho do PDF de saida (padrao: imprime o texto)")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    in_path = Path(args.input)

    try:
        df = ler_arquivo(BytesIO(in_path.read_bytes()), in_path.name)
        df, avisos = processar_dados_mensais(df, calcular_metricas=True)
        for aviso in avisos:
            logger.info(aviso)

        periodo = Periodo(args.mes, args.ano)
        comparacao = None
        if args.comparar_mes and args.comparar_ano:
            comparacao = Periodo(args.comparar_mes, args.comparar_ano)
    except DataValidationError as e:
        print(f"ERRO: {e}", file=sys.stderr)
        sys.exit(1)

    if args.consolidado:
        if df[COL_LOJA_ID].isna().all():
            print("ERRO: a coluna loja_id e obrigatoria no modo consolidado", file=sys.stderr)
            sys.exit(1)
        relatorio = RelatorioCliente(
            cliente={'nome': args.cliente},
            lojas=montar_lojas(df),
            periodo=periodo,
            comparacao=comparacao,
        )
        insights = calcular_insights_cliente(relatorio)
    else:
        loja = {
            'nome': args.loja,
            'marketplace': args.marketplace,
            'cnpj': {'cliente': {'nome': args.cliente}},
        }
        relatorio = RelatorioLoja(loja=loja, dados=df, periodo=periodo, comparacao=comparacao)
        insights = calcular_insights(relatorio)

    if args.pdf:
        Path(args.pdf).write_bytes(gerar_pdf(relatorio, insights))
        print(f"PDF gerado: {args.pdf}")
    else:
        print(gerar_relatorio_whatsapp(relatorio, insights))


if __name__ == "__main__":
    main()
