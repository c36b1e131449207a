"""Modelo das vendas auditadas, filtros e indicadores do painel."""

from .modelos import (
    ItemVenda,
    TabelaPreco,
    Venda,
    data_hora_exibicao,
    decimal_ou_zero,
    parse_tabelas_onde_existe,
    venda_de_registro,
)
from .filtros import FiltrosVendas, OpcoesFiltro, filtrar_vendas, filtros_padrao, opcoes_filtro
from .metricas import MetricasVendas, calcular_metricas

__all__ = [
    "FiltrosVendas",
    "ItemVenda",
    "MetricasVendas",
    "OpcoesFiltro",
    "TabelaPreco",
    "Venda",
    "calcular_metricas",
    "data_hora_exibicao",
    "decimal_ou_zero",
    "filtrar_vendas",
    "filtros_padrao",
    "opcoes_filtro",
    "parse_tabelas_onde_existe",
    "venda_de_registro",
]
