"""Coordena o envio único de alertas de auditoria para o webhook."""

from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import TYPE_CHECKING, Iterable, Protocol, Sequence
import threading

from src.auditoria.classificador import motivos_alerta
from src.logger import setup_logging

if TYPE_CHECKING:
	from src.vendas.modelos import Venda

logger = setup_logging("auditoria.despacho")


class Registro(Protocol):
	def foi_enviado(self, venda_id: str) -> bool: ...

	def marcar_enviado(self, venda_id: str) -> None: ...


class Notificador(Protocol):
	def enviar(self, venda: Venda, motivos: Sequence[str]) -> None: ...


class DespachoAlertas:
	"""Dispara o webhook no máximo uma vez por id de venda.

	O registro evita reenvios entre execuções; o conjunto `_em_envio` evita
	chamadas simultâneas para a mesma venda dentro deste processo. Duas
	instâncias da aplicação ainda podem enviar a mesma venda uma vez cada.
	"""

	def __init__(self, registro: Registro, notificador: Notificador):
		self.registro = registro
		self.notificador = notificador
		self._em_envio: set[str] = set()
		self._lock = threading.Lock()

	def em_envio(self) -> set[str]:
		with self._lock:
			return set(self._em_envio)

	def processar_alertas(self, vendas: Iterable[Venda]) -> list[str]:
		"""Verifica cada venda e envia os alertas pendentes.

		Retorna os ids entregues nesta passada.
		"""

		entregues: list[str] = []
		pendentes = 0
		for venda in vendas:
			if self.registro.foi_enviado(venda.id):
				continue
			if not motivos_alerta(venda):
				continue
			pendentes += 1
			if self.enviar_alerta(venda):
				entregues.append(venda.id)
		if pendentes:
			logger.info("Alertas pendentes: %s, entregues: %s", pendentes, len(entregues))
		return entregues

	def enviar_alerta(self, venda: Venda) -> bool:
		with self._lock:
			if venda.id in self._em_envio:
				return False
			if self.registro.foi_enviado(venda.id):
				return False
			motivos = motivos_alerta(venda)
			if not motivos:
				return False
			self._em_envio.add(venda.id)

		try:
			try:
				logger.info("Enviando alerta da venda #%s", venda.numero_lancamento)
				self.notificador.enviar(venda, motivos)
			except Exception as exc:
				# sem retry: a próxima atualização dos dados tenta de novo
				logger.exception("Erro ao enviar alerta da venda #%s: %s", venda.numero_lancamento, exc)
				return False

			logger.info("Alerta da venda #%s enviado", venda.numero_lancamento)
			try:
				self.registro.marcar_enviado(venda.id)
			except Exception as exc:
				logger.exception(
					"Alerta da venda #%s enviado, mas não registrado (será reenviado): %s",
					venda.numero_lancamento,
					exc,
				)
			return True
		finally:
			with self._lock:
				self._em_envio.discard(venda.id)

	def processar_em_segundo_plano(self, vendas: Sequence[Venda], executor: Executor) -> Future[list[str]]:
		return executor.submit(self.processar_alertas, list(vendas))
