"""Componentes Streamlit do painel de auditoria de vendas."""

from .detalhe import render_detalhe_venda
from .painel import render_painel

__all__ = ["render_detalhe_venda", "render_painel"]
