"""Registro persistente dos alertas já enviados ao webhook."""

from __future__ import annotations

from pathlib import Path
import json
import threading

import duckdb

from src.database import gravar_valor, ler_valor
from src.logger import setup_logging

logger = setup_logging("auditoria.registro")

CHAVE_ALERTAS_ENVIADOS = "sent_alert_webhooks"


class RegistroAlertasEnviados:
	"""Conjunto de ids de venda já notificados, guardado no DuckDB local.

	O conjunto é lido a cada consulta e regravado por inteiro a cada marcação.
	Um valor ilegível conta como conjunto vazio: preferimos reenviar um alerta
	a suprimi-lo em silêncio.
	"""

	def __init__(
		self,
		*,
		db_path: Path | str | None = None,
		chave: str = CHAVE_ALERTAS_ENVIADOS,
	):
		self.db_path = db_path
		self.chave = chave

	def listar_enviados(self) -> set[str]:
		try:
			bruto = ler_valor(self.chave, db_path=self.db_path)
		except (duckdb.Error, OSError) as exc:
			logger.warning("Não foi possível ler o registro de alertas (%s); tratando como vazio.", exc)
			return set()
		if not bruto:
			return set()
		try:
			dados = json.loads(bruto)
		except json.JSONDecodeError:
			logger.warning("Registro de alertas corrompido; tratando como vazio.")
			return set()
		if not isinstance(dados, list):
			logger.warning("Registro de alertas em formato inesperado (%s); tratando como vazio.", type(dados).__name__)
			return set()
		return {str(venda_id) for venda_id in dados}

	def foi_enviado(self, venda_id: str) -> bool:
		return venda_id in self.listar_enviados()

	def marcar_enviado(self, venda_id: str) -> None:
		enviados = self.listar_enviados()
		if venda_id in enviados:
			return
		enviados.add(venda_id)
		gravar_valor(self.chave, json.dumps(sorted(enviados)), db_path=self.db_path)
		logger.debug("Venda %s registrada como alertada.", venda_id)


class RegistroEmMemoria:
	"""Mesma interface do registro persistente, sem sobreviver a reinícios."""

	def __init__(self, enviados: set[str] | None = None):
		self._enviados = set(enviados or ())
		self._lock = threading.Lock()

	def listar_enviados(self) -> set[str]:
		with self._lock:
			return set(self._enviados)

	def foi_enviado(self, venda_id: str) -> bool:
		with self._lock:
			return venda_id in self._enviados

	def marcar_enviado(self, venda_id: str) -> None:
		with self._lock:
			self._enviados.add(venda_id)
