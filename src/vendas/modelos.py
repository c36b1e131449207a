from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo
import json

from src.logger import setup_logging

logger = setup_logging("vendas.modelos")

SEPARADOR_TABELAS = " | "
SEPARADOR_PRECO = ": "

__all__ = [
    "ItemVenda",
    "Venda",
    "TabelaPreco",
    "venda_de_registro",
    "item_de_registro",
    "parse_tabelas_onde_existe",
    "decimal_ou_zero",
    "data_hora_exibicao",
]


@dataclass(slots=True)
class ItemVenda:
    sku: Optional[str] = None
    produto: Optional[str] = None
    qtd: Optional[Decimal] = None
    tabela_usada: Optional[str] = None
    tabelas_onde_existe: Optional[str] = None
    vlr_bruto: Optional[Decimal] = None
    vlr_liquido: Optional[Decimal] = None
    vlr_desconto: Optional[Decimal] = None
    perc_desconto: Optional[Decimal] = None
    margem_perc: Optional[Decimal] = None
    lucro_reais: Optional[Decimal] = None
    prc_venda_unitario: Optional[Decimal] = None
    alerta_auditoria: Optional[str] = None
    local_estoque: Optional[str] = None

    def para_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "produto": self.produto,
            "qtd": _para_json(self.qtd),
            "tabela_usada": self.tabela_usada,
            "tabelas_onde_existe": self.tabelas_onde_existe,
            "vlr_bruto": _para_json(self.vlr_bruto),
            "vlr_liquido": _para_json(self.vlr_liquido),
            "vlr_desconto": _para_json(self.vlr_desconto),
            "perc_desconto": _para_json(self.perc_desconto),
            "margem_perc": _para_json(self.margem_perc),
            "lucro_reais": _para_json(self.lucro_reais),
            "prc_venda_unitario": _para_json(self.prc_venda_unitario),
            "alerta_auditoria": self.alerta_auditoria,
            "local_estoque": self.local_estoque,
        }


@dataclass(slots=True)
class Venda:
    """Uma venda (lançamento) com seus itens.

    O status de alerta não é guardado aqui: ele é sempre derivado dos itens
    por `src.auditoria.classificador`.
    """

    id: str
    numero_lancamento: int
    data_emissao: date
    hora_emissao: Optional[time] = None
    sale_date: Optional[date] = None
    nome_filial: Optional[str] = None
    nome_vendedor: Optional[str] = None
    nome_cliente: Optional[str] = None
    operacao: Optional[str] = None
    vlr_bruto: Optional[Decimal] = None
    vlr_desconto: Optional[Decimal] = None
    vlr_liquido: Optional[Decimal] = None
    perc_desconto: Optional[Decimal] = None
    margem_perc: Optional[Decimal] = None
    lucro_reais: Optional[Decimal] = None
    formas_pagamento: Optional[str] = None
    teve_liberacao: Optional[str] = None
    quem_autorizou: Optional[str] = None
    itens: List[ItemVenda] = field(default_factory=list)

    def resumo_dict(self) -> Dict[str, Any]:
        """Campos da venda no formato enviado ao webhook de alertas."""
        return {
            "id": self.id,
            "numero_lancamento": self.numero_lancamento,
            "data_emissao": self.data_emissao.isoformat(),
            "hora_emissao": self.hora_emissao.isoformat() if self.hora_emissao else None,
            "filial": self.nome_filial,
            "vendedor": self.nome_vendedor,
            "cliente": self.nome_cliente,
            "operacao": self.operacao,
            "vlr_bruto": _para_json(self.vlr_bruto),
            "vlr_liquido": _para_json(self.vlr_liquido),
            "vlr_desconto": _para_json(self.vlr_desconto),
            "perc_desconto": _para_json(self.perc_desconto),
            "margem_perc": _para_json(self.margem_perc),
            "lucro_reais": _para_json(self.lucro_reais),
            "formas_pagamento": self.formas_pagamento,
            "teve_liberacao": self.teve_liberacao,
            "quem_autorizou": self.quem_autorizou,
        }


@dataclass(frozen=True, slots=True)
class TabelaPreco:
    nome: str
    preco: Optional[str] = None


def decimal_ou_zero(valor: Optional[Decimal]) -> Decimal:
    """Regra única de coerção de nulos usada nas agregações."""
    return valor if valor is not None else Decimal("0")


def venda_de_registro(registro: Mapping[str, Any]) -> Venda:
    """Converte uma linha da tabela `sales` em `Venda`.

    Levanta `ValueError` quando faltam identificador, número de lançamento ou
    data de emissão válidos.
    """

    venda_id = registro.get("id")
    if venda_id in (None, ""):
        raise ValueError("Registro de venda sem id.")
    numero = registro.get("numero_lancamento")
    try:
        numero_lancamento = int(numero)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"numero_lancamento inválido na venda {venda_id}: {numero!r}") from exc
    data_emissao = _parse_data(registro.get("data_emissao"))
    if data_emissao is None:
        raise ValueError(f"data_emissao inválida na venda {venda_id}: {registro.get('data_emissao')!r}")

    return Venda(
        id=str(venda_id),
        numero_lancamento=numero_lancamento,
        data_emissao=data_emissao,
        hora_emissao=_parse_hora(registro.get("hora_emissao")),
        sale_date=_parse_data(registro.get("sale_date")),
        nome_filial=_texto(registro.get("nome_filial")),
        nome_vendedor=_texto(registro.get("nome_vendedor")),
        nome_cliente=_texto(registro.get("nome_cliente")),
        operacao=_texto(registro.get("operacao")),
        vlr_bruto=_decimal(registro.get("vlr_bruto")),
        vlr_desconto=_decimal(registro.get("vlr_desconto")),
        vlr_liquido=_decimal(registro.get("vlr_liquido")),
        perc_desconto=_decimal(registro.get("perc_desconto")),
        margem_perc=_decimal(registro.get("margem_perc")),
        lucro_reais=_decimal(registro.get("lucro_reais")),
        formas_pagamento=_texto(registro.get("formas_pagamento")),
        teve_liberacao=_texto(registro.get("teve_liberacao")),
        quem_autorizou=_texto(registro.get("quem_autorizou")),
        itens=_parse_itens(registro.get("items"), venda_id),
    )


def item_de_registro(registro: Mapping[str, Any]) -> ItemVenda:
    return ItemVenda(
        sku=_texto(registro.get("sku")),
        produto=_texto(registro.get("produto")),
        qtd=_decimal(registro.get("qtd")),
        tabela_usada=_texto(registro.get("tabela_usada")),
        tabelas_onde_existe=_texto(registro.get("tabelas_onde_existe")),
        vlr_bruto=_decimal(registro.get("vlr_bruto")),
        vlr_liquido=_decimal(registro.get("vlr_liquido")),
        vlr_desconto=_decimal(registro.get("vlr_desconto")),
        perc_desconto=_decimal(registro.get("perc_desconto")),
        margem_perc=_decimal(registro.get("margem_perc")),
        lucro_reais=_decimal(registro.get("lucro_reais")),
        prc_venda_unitario=_decimal(registro.get("prc_venda_unitario")),
        alerta_auditoria=_texto(registro.get("alerta_auditoria")),
        local_estoque=_texto(registro.get("local_estoque")),
    )


def parse_tabelas_onde_existe(texto: Optional[str]) -> List[TabelaPreco]:
    """Interpreta `"Tabela A: 10.00 | Tabela B: 12.50"`.

    Pares sem `": "` viram `TabelaPreco(nome, None)`. Nomes que contenham os
    próprios separadores são quebrados no primeiro `": "`.
    """

    if not texto:
        return []
    tabelas: List[TabelaPreco] = []
    for parte in texto.split(SEPARADOR_TABELAS):
        if not parte.strip():
            continue
        nome, separador, preco = parte.partition(SEPARADOR_PRECO)
        tabelas.append(TabelaPreco(nome=nome.strip(), preco=preco.strip() if separador else None))
    return tabelas


def data_hora_exibicao(
    venda: Venda,
    fuso_origem: str = "UTC",
    fuso_exibicao: str = "America/Sao_Paulo",
) -> datetime:
    # hora_emissao chega sem offset, mas está no fuso de origem
    base = venda.sale_date or venda.data_emissao
    hora = venda.hora_emissao or time(0, 0, 0)
    momento = datetime.combine(base, hora, tzinfo=ZoneInfo(fuso_origem))
    return momento.astimezone(ZoneInfo(fuso_exibicao))


def _parse_itens(bruto: Any, venda_id: Any) -> List[ItemVenda]:
    if bruto is None:
        return []
    if isinstance(bruto, str):
        try:
            bruto = json.loads(bruto)
        except json.JSONDecodeError:
            logger.warning("Itens da venda %s não são JSON válido; ignorando.", venda_id)
            return []
    if not isinstance(bruto, list):
        logger.warning("Itens da venda %s em formato inesperado: %s", venda_id, type(bruto).__name__)
        return []
    return [item_de_registro(item) for item in bruto if isinstance(item, Mapping)]


def _texto(valor: Any) -> Optional[str]:
    if valor is None:
        return None
    return str(valor)


def _decimal(valor: Any) -> Optional[Decimal]:
    if valor is None or isinstance(valor, bool):
        return None
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, int):
        return Decimal(valor)
    if isinstance(valor, float):
        return Decimal(str(valor))
    texto = str(valor).strip().replace(",", ".")
    if not texto:
        return None
    try:
        numero = Decimal(texto)
    except InvalidOperation:
        return None
    return numero if numero.is_finite() else None


def _parse_data(valor: Any) -> Optional[date]:
    if valor is None:
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    try:
        return date.fromisoformat(str(valor)[:10])
    except ValueError:
        return None


def _parse_hora(valor: Any) -> Optional[time]:
    if valor is None:
        return None
    if isinstance(valor, time):
        return valor
    try:
        return time.fromisoformat(str(valor)[:8])
    except ValueError:
        return None


def _para_json(valor: Optional[Decimal]) -> Optional[float]:
    return float(valor) if valor is not None else None
