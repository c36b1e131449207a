from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Sequence

import httpx

from src.auditoria.classificador import itens_com_alerta
from src.logger import setup_logging

if TYPE_CHECKING:
	from src.vendas.modelos import Venda

logger = setup_logging("auditoria.webhook")

DEFAULT_TIMEOUT = 30.0
_DEFAULT_HEADERS = {"Content-Type": "application/json"}


class ErroWebhook(RuntimeError):
	"""O webhook respondeu com status diferente de sucesso."""

	def __init__(self, status_code: int, corpo: str):
		super().__init__(f"Webhook falhou: {status_code}")
		self.status_code = status_code
		self.corpo = corpo


def montar_payload(
	venda: Venda,
	motivos: Sequence[str],
	*,
	agora: datetime | None = None,
) -> dict[str, Any]:
	momento = agora or datetime.now(timezone.utc)
	return {
		"venda": venda.resumo_dict(),
		"alertas": list(motivos),
		"itens_com_alerta": [item.para_dict() for item in itens_com_alerta(venda)],
		"timestamp": momento.isoformat(),
	}


class WebhookNotifier:
	"""Envia o alerta de uma venda para o webhook externo (ex.: n8n)."""

	def __init__(
		self,
		url: str,
		*,
		client: httpx.Client | None = None,
		timeout: float = DEFAULT_TIMEOUT,
	):
		if not url:
			raise RuntimeError("Configure a variável ALERTA_WEBHOOK_URL no ambiente ou arquivo .env")
		self.url = url
		self._client = client
		self._timeout = timeout

	def enviar(self, venda: Venda, motivos: Sequence[str]) -> None:
		"""Levanta `ErroWebhook` ou `httpx.HTTPError` quando a entrega falha."""

		payload = montar_payload(venda, motivos)
		logger.info(
			"Enviando webhook da venda #%s com %s alerta(s)",
			venda.numero_lancamento,
			len(motivos),
		)
		client = self._client or httpx.Client(timeout=self._timeout)
		close_client = self._client is None
		try:
			response = client.post(self.url, json=payload, headers=_DEFAULT_HEADERS)
			if not response.is_success:
				logger.error(
					"Webhook falhou com status %s: %s",
					response.status_code,
					response.text,
				)
				raise ErroWebhook(response.status_code, response.text)
		finally:
			if close_client:
				client.close()
		logger.info("Webhook enviado com sucesso para a venda #%s", venda.numero_lancamento)
