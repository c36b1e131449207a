"""Filtros aplicados à lista de vendas já carregada do Supabase."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from src.auditoria.classificador import venda_tem_alerta
from src.vendas.modelos import Venda, decimal_ou_zero

PERIODOS = ("hoje", "mes", "intervalo")
STATUS_ALERTA = "ALERTA"
STATUS_OK = "OK"


@dataclass
class FiltrosVendas:
    periodo: str = "hoje"
    data_inicio: date | None = None
    data_fim: date | None = None
    filial: str = ""
    vendedor: str = ""
    lancamento: str = ""
    tabela: str = ""
    operacao: str = ""
    status_alerta: str = ""
    desconto_minimo: Decimal = Decimal("0")


@dataclass
class OpcoesFiltro:
    filiais: list[str] = field(default_factory=list)
    vendedores: list[str] = field(default_factory=list)
    operacoes: list[str] = field(default_factory=list)
    tabelas: list[str] = field(default_factory=list)


def intervalo_periodo(periodo: str, hoje: date | None = None) -> tuple[date | None, date | None]:
    """Converte o seletor de período em datas (inclusivas)."""
    referencia = hoje or date.today()
    if periodo == "hoje":
        return referencia, referencia
    if periodo == "mes":
        return referencia.replace(day=1), referencia
    if periodo == "intervalo":
        # o operador ainda vai escolher as datas
        return None, None
    raise ValueError(f"Período desconhecido: {periodo!r}")


def filtros_padrao(hoje: date | None = None) -> FiltrosVendas:
    inicio, fim = intervalo_periodo("hoje", hoje)
    return FiltrosVendas(periodo="hoje", data_inicio=inicio, data_fim=fim)


def alterar_periodo(filtros: FiltrosVendas, periodo: str, hoje: date | None = None) -> FiltrosVendas:
    inicio, fim = intervalo_periodo(periodo, hoje)
    return replace(filtros, periodo=periodo, data_inicio=inicio, data_fim=fim)


def filtros_ativos(filtros: FiltrosVendas) -> bool:
    """Indica se há algo além do padrão (período "hoje" sem outros critérios)."""
    return bool(
        filtros.periodo != "hoje"
        or filtros.filial
        or filtros.vendedor
        or filtros.lancamento
        or filtros.tabela
        or filtros.operacao
        or filtros.status_alerta
        or filtros.desconto_minimo > 0
    )


def venda_atende(venda: Venda, filtros: FiltrosVendas) -> bool:
    # só a parte de data conta, sem hora nem fuso
    if filtros.data_inicio and venda.data_emissao < filtros.data_inicio:
        return False
    if filtros.data_fim and venda.data_emissao > filtros.data_fim:
        return False

    if filtros.filial and venda.nome_filial != filtros.filial:
        return False
    if filtros.vendedor and venda.nome_vendedor != filtros.vendedor:
        return False
    if filtros.lancamento and filtros.lancamento not in str(venda.numero_lancamento):
        return False
    if filtros.operacao and venda.operacao != filtros.operacao:
        return False
    if filtros.tabela and not any(item.tabela_usada == filtros.tabela for item in venda.itens):
        return False

    if filtros.status_alerta == STATUS_ALERTA and not venda_tem_alerta(venda):
        return False
    if filtros.status_alerta == STATUS_OK and venda_tem_alerta(venda):
        return False

    if filtros.desconto_minimo > 0 and decimal_ou_zero(venda.perc_desconto) < filtros.desconto_minimo:
        return False
    return True


def filtrar_vendas(vendas: Iterable[Venda], filtros: FiltrosVendas) -> list[Venda]:
    return [venda for venda in vendas if venda_atende(venda, filtros)]


def opcoes_filtro(vendas: Iterable[Venda]) -> OpcoesFiltro:
    """Valores distintos (ordenados) para os seletores do painel."""
    filiais: set[str] = set()
    vendedores: set[str] = set()
    operacoes: set[str] = set()
    tabelas: set[str] = set()
    for venda in vendas:
        if venda.nome_filial:
            filiais.add(venda.nome_filial)
        if venda.nome_vendedor:
            vendedores.add(venda.nome_vendedor)
        if venda.operacao:
            operacoes.add(venda.operacao)
        for item in venda.itens:
            if item.tabela_usada:
                tabelas.add(item.tabela_usada)
    return OpcoesFiltro(
        filiais=sorted(filiais),
        vendedores=sorted(vendedores),
        operacoes=sorted(operacoes),
        tabelas=sorted(tabelas),
    )
