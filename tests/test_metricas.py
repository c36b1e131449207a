from datetime import date
from decimal import Decimal

from src.vendas.metricas import calcular_metricas, percentual_do_total, total_itens
from src.vendas.modelos import ItemVenda, Venda


def _venda(
    venda_id: str,
    numero: int,
    *,
    liberacao: str | None = None,
    alerta: str | None = None,
    liquido: str | None = None,
    desconto: str | None = None,
    lucro: str | None = None,
    perc: str | None = None,
    margem: str | None = None,
) -> Venda:
    return Venda(
        id=venda_id,
        numero_lancamento=numero,
        data_emissao=date(2025, 1, 10),
        teve_liberacao=liberacao,
        vlr_liquido=Decimal(liquido) if liquido else None,
        vlr_desconto=Decimal(desconto) if desconto else None,
        lucro_reais=Decimal(lucro) if lucro else None,
        perc_desconto=Decimal(perc) if perc else None,
        margem_perc=Decimal(margem) if margem else None,
        itens=[ItemVenda(produto="Mesa", alerta_auditoria=alerta)],
    )


def test_lancamento_dividido_conta_uma_vez_mas_soma_os_dois():
    vendas = [
        _venda("a", 500, liberacao="SIM", liquido="100.00"),
        _venda("b", 500, liberacao="NAO", liquido="250.50"),
    ]

    metricas = calcular_metricas(vendas)

    assert metricas.total_vendas == 1
    assert metricas.vendas_com_liberacao == 1
    assert metricas.total_faturamento == Decimal("350.50")


def test_alertas_contados_por_lancamento():
    vendas = [
        _venda("a", 1, alerta="ALERTA: preço"),
        _venda("b", 1, alerta="OK"),
        _venda("c", 2, alerta="OK"),
        _venda("d", 3, alerta="alerta de margem"),
    ]

    metricas = calcular_metricas(vendas)

    assert metricas.total_vendas == 3
    assert metricas.vendas_com_alerta == 2
    assert metricas.vendas_com_liberacao == 0


def test_somas_tratam_nulo_como_zero():
    vendas = [
        _venda("a", 1, liquido="10", desconto="2.5", lucro="4"),
        _venda("b", 2),
    ]

    metricas = calcular_metricas(vendas)

    assert metricas.total_faturamento == Decimal("10")
    assert metricas.total_desconto_reais == Decimal("2.5")
    assert metricas.total_lucro == Decimal("4")


def test_medias_com_duas_casas_usando_todos_os_registros():
    vendas = [
        _venda("a", 1, perc="10", margem="30"),
        _venda("b", 1, perc="5", margem="25.5"),
        _venda("c", 2),
    ]

    metricas = calcular_metricas(vendas)

    assert metricas.percentual_desconto_medio == "5.00"
    assert metricas.margem_media == "18.50"


def test_metricas_sem_vendas():
    metricas = calcular_metricas([])

    assert metricas.total_vendas == 0
    assert metricas.vendas_com_alerta == 0
    assert metricas.total_faturamento == Decimal("0")
    assert metricas.percentual_desconto_medio == "0.00"
    assert metricas.margem_media == "0.00"


def test_percentual_do_total_e_total_itens():
    assert percentual_do_total(1, 3) == "33.3"
    assert percentual_do_total(0, 0) == "0.0"
    assert total_itens([_venda("a", 1), _venda("b", 1)]) == 2


def test_media_com_meio_centavo_arredonda_para_cima():
    vendas = [
        _venda("a", 1, perc="0.25", margem="10.005"),
        _venda("b", 2, perc="0", margem="10.005"),
    ]

    metricas = calcular_metricas(vendas)

    assert metricas.percentual_desconto_medio == "0.13"
    assert metricas.margem_media == "10.01"
