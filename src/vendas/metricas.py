"""Indicadores do painel calculados sobre as vendas já filtradas."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from src.auditoria.classificador import venda_tem_alerta
from src.vendas.modelos import Venda, decimal_ou_zero

LIBERACAO_SIM = "SIM"
_CENTAVO = Decimal("0.01")


@dataclass(frozen=True)
class MetricasVendas:
    total_vendas: int
    vendas_com_alerta: int
    vendas_com_liberacao: int
    total_faturamento: Decimal
    total_desconto_reais: Decimal
    total_lucro: Decimal
    percentual_desconto_medio: str
    margem_media: str


def calcular_metricas(vendas: Sequence[Venda]) -> MetricasVendas:
    """Calcula os indicadores do painel.

    As contagens agrupam registros pelo `numero_lancamento` (um lançamento
    dividido em vários registros conta uma vez). Já somas e médias usam todos
    os registros, então valores de um mesmo lançamento se acumulam.
    """

    grupos: dict[int, list[Venda]] = defaultdict(list)
    for venda in vendas:
        grupos[venda.numero_lancamento].append(venda)

    vendas_com_alerta = sum(
        1 for registros in grupos.values() if any(venda_tem_alerta(v) for v in registros)
    )
    vendas_com_liberacao = sum(
        1
        for registros in grupos.values()
        if any(v.teve_liberacao == LIBERACAO_SIM for v in registros)
    )

    total_faturamento = sum((decimal_ou_zero(v.vlr_liquido) for v in vendas), Decimal("0"))
    total_desconto_reais = sum((decimal_ou_zero(v.vlr_desconto) for v in vendas), Decimal("0"))
    total_lucro = sum((decimal_ou_zero(v.lucro_reais) for v in vendas), Decimal("0"))

    return MetricasVendas(
        total_vendas=len(grupos),
        vendas_com_alerta=vendas_com_alerta,
        vendas_com_liberacao=vendas_com_liberacao,
        total_faturamento=total_faturamento,
        total_desconto_reais=total_desconto_reais,
        total_lucro=total_lucro,
        percentual_desconto_medio=_media_formatada([v.perc_desconto for v in vendas]),
        margem_media=_media_formatada([v.margem_perc for v in vendas]),
    )


def percentual_do_total(parte: int, total: int) -> str:
    if total == 0:
        return "0.0"
    return f"{parte / total * 100:.1f}"


def total_itens(vendas: Sequence[Venda]) -> int:
    return sum(len(venda.itens) for venda in vendas)


def _media_formatada(valores: Sequence[Decimal | None]) -> str:
    if not valores:
        return "0.00"
    soma = sum((decimal_ou_zero(valor) for valor in valores), Decimal("0"))
    # meio centavo arredonda para cima
    media = (soma / len(valores)).quantize(_CENTAVO, rounding=ROUND_HALF_UP)
    return f"{media:.2f}"
