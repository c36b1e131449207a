"""Regra de auditoria que decide se uma venda está em alerta.

A coluna `alerta_auditoria` da venda não é confiável; o status vem sempre
dos itens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from src.vendas.modelos import ItemVenda, Venda

STATUS_OK = "OK"
MARCADOR_ALERTA = "alerta"


def item_tem_alerta(item: ItemVenda) -> bool:
	status = item.alerta_auditoria
	if not status or status == STATUS_OK:
		return False
	# outros valores sem "alerta" são anomalias, não alertas de auditoria
	return MARCADOR_ALERTA in status.lower()


def itens_com_alerta(venda: Venda) -> list[ItemVenda]:
	return [item for item in venda.itens if item_tem_alerta(item)]


def venda_tem_alerta(venda: Venda) -> bool:
	return any(item_tem_alerta(item) for item in venda.itens)


def motivos_alerta(venda: Venda) -> list[str]:
	"""Retorna `"<produto>: <alerta_auditoria>"` para cada item em alerta, na ordem dos itens."""
	return [f"{item.produto}: {item.alerta_auditoria}" for item in itens_com_alerta(venda)]
