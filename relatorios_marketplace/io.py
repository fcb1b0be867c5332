"""
io.py - Funcoes de leitura, validacao e normalizacao de dados mensais.

Este modulo contem:
- Leitura de arquivos Excel/CSV com dados mensais das lojas
- Validacao de colunas obrigatorias
- Conversao das linhas do banco (lista de dicts) em DataFrame tipado
- Calculo de ROAS/ACOS por registro
- Agrupamento dos dados mensais por loja
"""

import logging
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .constants import (
    DADOS_REQUIRED_COLUMNS,
    DADOS_OPTIONAL_COLUMNS,
    COL_ID,
    COL_LOJA_ID,
    COL_MES,
    COL_ANO,
    COL_FATURAMENTO,
    COL_INVESTIMENTO,
    COL_ITENS,
    COL_TIPO_CAMPANHA,
    COL_ROAS,
    COL_ACOS,
    TIPOS_CAMPANHA,
)

logger = logging.getLogger(__name__)

ENCODINGS = ['utf-8-sig', 'utf-8', 'latin-1', 'cp1252']


class DataValidationError(Exception):
    """Excecao customizada para erros de validacao de dados."""
    pass


def detectar_separador(primeira_linha: str) -> str:
    """
    Detecta o separador de um CSV pela linha de cabecalho.

    Args:
        primeira_linha: Linha de cabecalho do arquivo

    Returns:
        Separador mais frequente (padrao: virgula)
    """
    contagem = {
        '|': primeira_linha.count('|'),
        ';': primeira_linha.count(';'),
        ',': primeira_linha.count(','),
        '\t': primeira_linha.count('\t')
    }
    separador = max(contagem, key=contagem.get)
    if contagem[separador] == 0:
        separador = ','
    return separador


def ler_arquivo(arquivo: BytesIO, nome_arquivo: str) -> pd.DataFrame:
    """
    Le um arquivo Excel ou CSV e retorna um DataFrame.

    Args:
        arquivo: Buffer do arquivo carregado
        nome_arquivo: Nome do arquivo para detectar extensao

    Returns:
        DataFrame com os dados do arquivo

    Raises:
        DataValidationError: Se o formato do arquivo nao for suportado
    """
    nome_lower = nome_arquivo.lower()

    try:
        if nome_lower.endswith('.xlsx'):
            df = pd.read_excel(arquivo, engine='openpyxl')
        elif nome_lower.endswith('.csv'):
            arquivo.seek(0)
            conteudo_bruto = arquivo.read()

            # Detectar encoding
            conteudo_texto = None
            encoding_usado = None
            for enc in ENCODINGS:
                try:
                    conteudo_texto = conteudo_bruto.decode(enc)
                    encoding_usado = enc
                    break
                except UnicodeDecodeError:
                    continue

            if conteudo_texto is None:
                raise DataValidationError(
                    "Nao foi possivel decodificar o arquivo CSV. "
                    "Tente converter para Excel (.xlsx) antes de enviar."
                )

            linhas = conteudo_texto.splitlines()
            if not linhas:
                raise DataValidationError(f"Arquivo vazio: {nome_arquivo}")

            separador = detectar_separador(linhas[0])

            df = pd.read_csv(
                BytesIO(conteudo_bruto),
                sep=separador,
                encoding=encoding_usado,
                quotechar='"',
                keep_default_na=True,
                on_bad_lines="error"
            )
            logger.debug(
                "CSV %s lido: encoding=%s separador=%r linhas=%s",
                nome_arquivo, encoding_usado, separador, len(df)
            )
        else:
            raise DataValidationError(
                f"Formato de arquivo nao suportado: {nome_arquivo}. "
                "Use .xlsx ou .csv"
            )

        return df

    except Exception as e:
        if isinstance(e, DataValidationError):
            raise
        raise DataValidationError(f"Erro ao ler arquivo {nome_arquivo}: {str(e)}")


def validar_colunas(
    df: pd.DataFrame,
    colunas_obrigatorias: List[str],
) -> Tuple[bool, List[str]]:
    """
    Valida se as colunas obrigatorias existem no DataFrame.

    Args:
        df: DataFrame a ser validado
        colunas_obrigatorias: Lista de nomes de colunas obrigatorias

    Returns:
        Tupla (sucesso, lista_colunas_faltantes)
    """
    colunas_existentes = set(str(c).strip() for c in df.columns)
    colunas_faltantes = [c for c in colunas_obrigatorias if c not in colunas_existentes]

    return (len(colunas_faltantes) == 0, colunas_faltantes)


def calcular_roas_acos(
    faturamento: float,
    investimento: float
) -> Tuple[Optional[float], Optional[float]]:
    """
    Calcula ROAS e ACOS de um registro mensal.

    Sem investimento nao ha ROAS/ACOS (ambos None). ACOS e guardado
    como fracao do faturamento, e fica None quando nao ha faturamento.

    Args:
        faturamento: Faturamento bruto do mes
        investimento: Investimento em Ads do mes

    Returns:
        Tupla (roas, acos)
    """
    faturamento = float(faturamento or 0)
    investimento = float(investimento or 0)

    if investimento == 0:
        return None, None

    roas = round(faturamento / investimento, 2)
    acos = round(investimento / faturamento, 4) if faturamento != 0 else None

    return roas, acos


def dados_para_dataframe(
    dados: Union[pd.DataFrame, Iterable[Dict[str, Any]], None]
) -> pd.DataFrame:
    """
    Converte linhas mensais (DataFrame ou lista de dicts) em DataFrame tipado.

    - mes/ano/itens_vendidos como inteiros
    - faturamento/investimento como float (ausentes viram 0)
    - roas/acos como float, preservando ausentes como NaN

    Args:
        dados: Linhas mensais vindas do banco ou de um arquivo

    Returns:
        DataFrame com todas as colunas conhecidas

    Raises:
        DataValidationError: Se colunas obrigatorias faltarem ou mes/ano forem invalidos
    """
    if dados is None:
        dados = []

    if isinstance(dados, pd.DataFrame):
        df = dados.copy()
    else:
        df = pd.DataFrame(list(dados))

    if df.empty and len(df.columns) == 0:
        df = pd.DataFrame(columns=DADOS_REQUIRED_COLUMNS)

    # Normalizar nomes de colunas (remover espacos)
    df.columns = [str(c).strip() for c in df.columns]

    valido, faltantes = validar_colunas(df, DADOS_REQUIRED_COLUMNS)
    if not valido:
        raise DataValidationError(
            f"Colunas obrigatorias faltando nos dados mensais: {', '.join(faltantes)}"
        )

    for col in DADOS_OPTIONAL_COLUMNS:
        if col not in df.columns:
            df[col] = None

    for col in (COL_MES, COL_ANO):
        numeros = pd.to_numeric(df[col], errors='coerce')
        if numeros.isna().any():
            raise DataValidationError(f"Valores invalidos na coluna '{col}'")
        df[col] = numeros.astype(int)

    for col in (COL_FATURAMENTO, COL_INVESTIMENTO):
        df[col] = pd.to_numeric(df[col], errors='coerce').fillna(0.0).astype(float)

    df[COL_ITENS] = pd.to_numeric(df[COL_ITENS], errors='coerce').fillna(0).astype(int)

    for col in (COL_ROAS, COL_ACOS):
        df[col] = pd.to_numeric(df[col], errors='coerce').astype(float)

    return df.reset_index(drop=True)


def processar_dados_mensais(
    dados: Union[pd.DataFrame, Iterable[Dict[str, Any]]],
    calcular_metricas: bool = False
) -> Tuple[pd.DataFrame, List[str]]:
    """
    Valida e normaliza dados mensais para geracao de relatorios.

    Args:
        dados: Linhas mensais (DataFrame ou lista de dicts)
        calcular_metricas: Se True, preenche ROAS/ACOS ausentes a partir
            do faturamento e do investimento

    Returns:
        Tupla (DataFrame processado, lista de avisos)

    Raises:
        DataValidationError: Se colunas faltarem ou houver mes fora de 1-12
    """
    avisos = []

    df = dados_para_dataframe(dados)

    meses_invalidos = df[(df[COL_MES] < 1) | (df[COL_MES] > 12)]
    if len(meses_invalidos) > 0:
        raise DataValidationError(
            f"{len(meses_invalidos)} registros com mes fora do intervalo 1-12"
        )

    # Tipo de campanha fora do conjunto esperado
    tipos = df[COL_TIPO_CAMPANHA].dropna().astype(str).str.strip().str.lower()
    desconhecidos = sorted(set(tipos) - set(TIPOS_CAMPANHA))
    if desconhecidos:
        avisos.append(f"Tipos de campanha nao reconhecidos: {', '.join(desconhecidos)}")

    negativos = df[
        (df[COL_FATURAMENTO] < 0) | (df[COL_INVESTIMENTO] < 0) | (df[COL_ITENS] < 0)
    ]
    if len(negativos) > 0:
        avisos.append(f"{len(negativos)} registros com valores negativos")

    if calcular_metricas:
        sem_metricas = df[COL_ROAS].isna() & df[COL_ACOS].isna()
        for idx in df.index[sem_metricas]:
            roas, acos = calcular_roas_acos(
                df.at[idx, COL_FATURAMENTO], df.at[idx, COL_INVESTIMENTO]
            )
            df.at[idx, COL_ROAS] = roas
            df.at[idx, COL_ACOS] = acos
        if sem_metricas.any():
            avisos.append(f"ROAS/ACOS calculados para {int(sem_metricas.sum())} registros")

    avisos.append(f"Total de registros: {len(df)}")

    # Registros repetidos para a mesma loja/periodo sao somados nos relatorios
    chave = [COL_LOJA_ID, COL_MES, COL_ANO]
    repetidos = df[df[COL_LOJA_ID].notna()].duplicated(subset=chave, keep=False)
    if repetidos.any():
        avisos.append(
            f"{int(repetidos.sum())} registros compartilham loja/periodo e serao somados"
        )

    return df, avisos


def montar_lojas_consolidadas(
    lojas: List[Dict[str, Any]],
    dados: Iterable[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """
    Agrupa os dados mensais por loja.

    Args:
        lojas: Lojas do cliente (formato do banco)
        dados: Linhas mensais de todas as lojas (com 'loja_id')

    Returns:
        Copia das lojas com a chave 'dados_mensais' preenchida
    """
    por_loja: Dict[Any, List[Dict[str, Any]]] = {}
    for linha in dados:
        por_loja.setdefault(linha.get(COL_LOJA_ID), []).append(linha)

    return [
        {**loja, 'dados_mensais': por_loja.get(loja.get(COL_ID), [])}
        for loja in lojas
    ]
