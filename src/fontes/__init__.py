"""Fontes de dados externas do painel (vendas vindas do Supabase)."""

from .supabase import ErroFonteDados, buscar_vendas, buscar_registros

__all__ = [
	"ErroFonteDados",
	"buscar_registros",
	"buscar_vendas",
]
