from typing import Any, Dict, List, Optional

import httpx

from src.config import Configuracao, carregar_configuracao
from src.logger import setup_logging
from src.vendas.modelos import Venda, venda_de_registro

logger = setup_logging("fontes.supabase")

TABELA_VENDAS = "sales"
_REST_PATH = "/rest/v1/{tabela}"

__all__ = [
    "ErroFonteDados",
    "buscar_registros",
    "buscar_vendas",
]


class ErroFonteDados(RuntimeError):
    """Resposta do Supabase fora do formato esperado."""


def _montar_headers(chave: str) -> Dict[str, str]:
    return {
        "apikey": chave,
        "Authorization": f"Bearer {chave}",
        "Accept": "application/json",
    }


def buscar_registros(
    *,
    config: Optional[Configuracao] = None,
    client: Optional[httpx.Client] = None,
) -> List[Dict[str, Any]]:
    """Busca todas as linhas da tabela de vendas, da emissão mais recente para a mais antiga."""

    configuracao = config or carregar_configuracao()
    base_url, chave = configuracao.exigir_supabase()
    url = base_url + _REST_PATH.format(tabela=TABELA_VENDAS)
    params = {"select": "*", "order": "data_emissao.desc"}
    session = (
        client
        if client is not None
        else httpx.Client(timeout=configuracao.http_timeout)
    )
    needs_close = client is None
    try:
        response = session.get(url, params=params, headers=_montar_headers(chave))
        response.raise_for_status()
        dados = response.json()
    except httpx.HTTPError as e:
        logger.error(f"Erro HTTP ao buscar vendas no Supabase: {e}")
        raise
    except ValueError as e:
        logger.error(f"Resposta do Supabase não é JSON válido: {e}")
        raise ErroFonteDados("Resposta do Supabase não é JSON válido.") from e
    finally:
        if needs_close:
            session.close()

    if not isinstance(dados, list):
        logger.error("Resposta do Supabase em formato inesperado: %s", type(dados).__name__)
        raise ErroFonteDados("Resposta do Supabase não é uma lista de vendas.")
    return dados


def buscar_vendas(
    *,
    config: Optional[Configuracao] = None,
    client: Optional[httpx.Client] = None,
) -> List[Venda]:
    registros = buscar_registros(config=config, client=client)
    vendas: List[Venda] = []
    descartados = 0
    for registro in registros:
        if not isinstance(registro, dict):
            descartados += 1
            continue
        try:
            vendas.append(venda_de_registro(registro))
        except ValueError as e:
            descartados += 1
            # venda descartada não passa pela auditoria de alertas
            logger.error(f"Registro de venda ignorado (id={registro.get('id')}): {e}")
    logger.info(f"{len(vendas)} vendas carregadas do Supabase ({descartados} descartadas)")
    return vendas
