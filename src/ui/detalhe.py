from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from src.auditoria.classificador import item_tem_alerta, itens_com_alerta, venda_tem_alerta
from src.config import Configuracao
from src.vendas.modelos import ItemVenda, Venda, data_hora_exibicao, decimal_ou_zero, parse_tabelas_onde_existe


def _linhas_itens(itens: list[ItemVenda]) -> pd.DataFrame:
    linhas: list[dict[str, Any]] = []
    for item in itens:
        linhas.append(
            {
                "SKU": item.sku or "—",
                "Produto": item.produto or "—",
                "Qtd.": float(decimal_ou_zero(item.qtd)),
                "Preço unitário": float(decimal_ou_zero(item.prc_venda_unitario)),
                "Valor líquido": float(decimal_ou_zero(item.vlr_liquido)),
                "Desconto %": float(decimal_ou_zero(item.perc_desconto)),
                "Margem %": float(decimal_ou_zero(item.margem_perc)),
                "Tabela usada": item.tabela_usada or "—",
                "Status": "ALERTA" if item_tem_alerta(item) else (item.alerta_auditoria or "N/A"),
            }
        )
    return pd.DataFrame(linhas)


def render_detalhe_venda(venda: Venda, config: Configuracao) -> None:
    """Mostra cabeçalho, motivos de alerta, itens e tabelas de preço da venda."""

    momento = data_hora_exibicao(venda, config.fuso_origem, config.fuso_exibicao)
    status = "🚨 ALERTA" if venda_tem_alerta(venda) else "✅ OK"
    st.subheader(f"Lançamento #{venda.numero_lancamento} · {status}")
    st.caption(momento.strftime("%d/%m/%Y às %H:%M:%S"))

    alertados = itens_com_alerta(venda)
    if alertados:
        st.error("Atenção: possível irregularidade detectada")
        for item in alertados:
            st.write(f"- {item.alerta_auditoria}")

    col1, col2, col3 = st.columns(3)
    col1.write(f"**Filial:** {venda.nome_filial or '—'}")
    col1.write(f"**Vendedor:** {venda.nome_vendedor or '—'}")
    col2.write(f"**Cliente:** {venda.nome_cliente or '—'}")
    col2.write(f"**Operação:** {venda.operacao or '—'}")
    col3.write(f"**Pagamento:** {venda.formas_pagamento or '—'}")
    if venda.teve_liberacao == "SIM":
        col3.write(f"**Liberação autorizada por:** {venda.quem_autorizou or '—'}")

    st.write(f"**Produtos ({len(venda.itens)})**")
    if not venda.itens:
        st.info("Venda sem itens registrados.")
        return
    st.dataframe(_linhas_itens(venda.itens), hide_index=True, use_container_width=True)

    for item in venda.itens:
        tabelas = parse_tabelas_onde_existe(item.tabelas_onde_existe)
        if not tabelas:
            continue
        with st.expander(f"Tabelas disponíveis · {item.produto or item.sku or '—'}"):
            st.dataframe(
                pd.DataFrame(
                    [
                        {
                            "Tabela": tabela.nome,
                            "Preço": tabela.preco or "—",
                            "Usada": "Sim" if tabela.nome == item.tabela_usada else "",
                        }
                        for tabela in tabelas
                    ]
                ),
                hide_index=True,
                use_container_width=True,
            )
