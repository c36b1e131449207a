"""Painel principal: indicadores, filtros e tabela de vendas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Sequence

import pandas as pd
import streamlit as st

from src.auditoria.classificador import venda_tem_alerta
from src.config import Configuracao
from src.ui.detalhe import render_detalhe_venda
from src.vendas.filtros import (
    STATUS_ALERTA,
    STATUS_OK,
    FiltrosVendas,
    OpcoesFiltro,
    alterar_periodo,
    filtrar_vendas,
    filtros_ativos,
    filtros_padrao,
    opcoes_filtro,
)
from src.vendas.metricas import calcular_metricas, percentual_do_total, total_itens
from src.vendas.modelos import Venda, data_hora_exibicao, decimal_ou_zero

_CHAVE_FILTROS = "filtros_vendas"
_TODOS = "Todos"
_ROTULOS_PERIODO = {"hoje": "Hoje", "mes": "Este mês", "intervalo": "Intervalo"}
_ROTULOS_STATUS = {"": _TODOS, STATUS_ALERTA: "Com alerta", STATUS_OK: "Sem alerta"}
_CHAVES_WIDGETS = (
    "filtro_periodo",
    "filtro_data_inicio",
    "filtro_data_fim",
    "filtro_operacao",
    "filtro_filial",
    "filtro_vendedor",
    "filtro_lancamento",
    "filtro_tabela",
    "filtro_status",
    "filtro_desconto",
)


def formatar_moeda(valor: Decimal | None) -> str:
    texto = f"{decimal_ou_zero(valor):,.2f}"
    # 1,234.56 -> 1.234,56
    return "R$ " + texto.replace(",", "_").replace(".", ",").replace("_", ".")


def montar_tabela(vendas: Sequence[Venda], config: Configuracao) -> pd.DataFrame:
    linhas: list[dict[str, Any]] = []
    for venda in vendas:
        momento = data_hora_exibicao(venda, config.fuso_origem, config.fuso_exibicao)
        linhas.append(
            {
                "Lançamento": venda.numero_lancamento,
                "Data": momento.strftime("%d/%m/%Y"),
                "Hora": momento.strftime("%H:%M:%S"),
                "Filial": venda.nome_filial or "—",
                "Vendedor": venda.nome_vendedor or "—",
                "Cliente": venda.nome_cliente or "—",
                "Operação": venda.operacao or "—",
                "Itens": len(venda.itens),
                "Valor líquido": float(decimal_ou_zero(venda.vlr_liquido)),
                "Desconto %": float(decimal_ou_zero(venda.perc_desconto)),
                "Margem %": float(decimal_ou_zero(venda.margem_perc)),
                "Liberação": venda.teve_liberacao or "—",
                "Status": STATUS_ALERTA if venda_tem_alerta(venda) else STATUS_OK,
            }
        )
    return pd.DataFrame(linhas)


def _obter_filtros() -> FiltrosVendas:
    if _CHAVE_FILTROS not in st.session_state:
        st.session_state[_CHAVE_FILTROS] = filtros_padrao()
    return st.session_state[_CHAVE_FILTROS]


def _seletor(rotulo: str, opcoes: list[str], atual: str, chave: str) -> str:
    valores = [_TODOS, *opcoes]
    indice = valores.index(atual) if atual in valores else 0
    escolhido = st.selectbox(rotulo, valores, index=indice, key=chave)
    return "" if escolhido == _TODOS else escolhido


def _render_filtros(filtros: FiltrosVendas, opcoes: OpcoesFiltro) -> FiltrosVendas:
    with st.expander("Filtros", expanded=True):
        col_periodo, col_limpar = st.columns([4, 1])
        with col_periodo:
            periodo = st.radio(
                "Período",
                list(_ROTULOS_PERIODO),
                index=list(_ROTULOS_PERIODO).index(filtros.periodo),
                format_func=lambda chave: _ROTULOS_PERIODO[chave],
                horizontal=True,
                key="filtro_periodo",
            )
        with col_limpar:
            if filtros_ativos(filtros) and st.button("Limpar filtros"):
                st.session_state[_CHAVE_FILTROS] = filtros_padrao()
                for chave in _CHAVES_WIDGETS:
                    st.session_state.pop(chave, None)
                st.rerun()

        if periodo != filtros.periodo:
            filtros = alterar_periodo(filtros, periodo)

        if filtros.periodo == "intervalo":
            col_inicio, col_fim = st.columns(2)
            data_inicio = col_inicio.date_input("Data inicial", value=filtros.data_inicio, format="DD/MM/YYYY", key="filtro_data_inicio")
            data_fim = col_fim.date_input("Data final", value=filtros.data_fim, format="DD/MM/YYYY", key="filtro_data_fim")
            filtros.data_inicio = data_inicio if isinstance(data_inicio, date) else None
            filtros.data_fim = data_fim if isinstance(data_fim, date) else None

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            filtros.operacao = _seletor("Operação", opcoes.operacoes, filtros.operacao, "filtro_operacao")
            filtros.filial = _seletor("Filial", opcoes.filiais, filtros.filial, "filtro_filial")
        with col2:
            filtros.vendedor = _seletor("Vendedor", opcoes.vendedores, filtros.vendedor, "filtro_vendedor")
            filtros.lancamento = st.text_input("Lançamento", value=filtros.lancamento, key="filtro_lancamento").strip()
        with col3:
            filtros.tabela = _seletor("Tabela usada", opcoes.tabelas, filtros.tabela, "filtro_tabela")
            filtros.status_alerta = st.selectbox(
                "Status",
                list(_ROTULOS_STATUS),
                index=list(_ROTULOS_STATUS).index(filtros.status_alerta),
                format_func=lambda chave: _ROTULOS_STATUS[chave],
                key="filtro_status",
            )
        with col4:
            desconto = st.number_input(
                "Desconto mínimo (%)",
                min_value=0.0,
                max_value=100.0,
                value=float(filtros.desconto_minimo),
                step=1.0,
                key="filtro_desconto",
            )
            filtros.desconto_minimo = Decimal(str(desconto))

    st.session_state[_CHAVE_FILTROS] = filtros
    return filtros


def render_painel(vendas: Sequence[Venda], config: Configuracao) -> None:
    filtros = _render_filtros(_obter_filtros(), opcoes_filtro(vendas))
    filtradas = filtrar_vendas(vendas, filtros)
    metricas = calcular_metricas(filtradas)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total de vendas", metricas.total_vendas, help="Lançamentos distintos no período")
    col2.metric("Total faturamento", formatar_moeda(metricas.total_faturamento))
    col3.metric(
        "Total desconto",
        formatar_moeda(metricas.total_desconto_reais),
        help=f"Média de {metricas.percentual_desconto_medio}%",
    )
    col4.metric(
        "Total lucro",
        formatar_moeda(metricas.total_lucro),
        help=f"Margem média {metricas.margem_media}%",
    )

    col5, col6, col7, col8 = st.columns(4)
    col5.metric(
        "Vendas com alerta",
        metricas.vendas_com_alerta,
        help=f"{percentual_do_total(metricas.vendas_com_alerta, metricas.total_vendas)}% do total",
    )
    col6.metric(
        "Pedidos de liberação",
        metricas.vendas_com_liberacao,
        help=f"{percentual_do_total(metricas.vendas_com_liberacao, metricas.total_vendas)}% do total",
    )
    col7.metric("Desconto médio", f"{metricas.percentual_desconto_medio}%")
    col8.metric("Margem média", f"{metricas.margem_media}%")

    st.markdown("---")

    if not filtradas:
        st.info("Nenhuma venda encontrada para os filtros selecionados.")
        return

    st.dataframe(
        montar_tabela(filtradas, config),
        hide_index=True,
        use_container_width=True,
        column_config={
            "Valor líquido": st.column_config.NumberColumn("Valor líquido", format="R$ %.2f"),
            "Desconto %": st.column_config.NumberColumn("Desconto %", format="%.2f"),
            "Margem %": st.column_config.NumberColumn("Margem %", format="%.2f"),
        },
    )
    st.caption(
        f"Exibindo {metricas.total_vendas} vendas com {total_itens(filtradas)} itens no total"
    )

    indice = st.selectbox(
        "Detalhar venda",
        options=list(range(len(filtradas))),
        format_func=lambda idx: f"#{filtradas[idx].numero_lancamento} · {filtradas[idx].nome_cliente or 'Cliente não informado'}",
    )
    render_detalhe_venda(filtradas[indice], config)
