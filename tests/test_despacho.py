from concurrent.futures import ThreadPoolExecutor
from datetime import date
import threading

import httpx
import pytest

from src.auditoria.despacho import DespachoAlertas
from src.auditoria.registro import RegistroAlertasEnviados, RegistroEmMemoria
from src.auditoria.webhook import ErroWebhook
from src.vendas.modelos import ItemVenda, Venda


def _venda(venda_id: str = "venda-1", alerta: str | None = "ALERTA: desconto excessivo") -> Venda:
	return Venda(
		id=venda_id,
		numero_lancamento=5001,
		data_emissao=date(2025, 1, 10),
		itens=[ItemVenda(produto="Mesa", alerta_auditoria=alerta)],
	)


class FakeNotificador:
	def __init__(self, falhar: bool = False):
		self.falhar = falhar
		self.chamadas: list[tuple[str, list[str]]] = []

	def enviar(self, venda, motivos):
		self.chamadas.append((venda.id, list(motivos)))
		if self.falhar:
			raise ErroWebhook(500, "erro interno")


def test_processar_duas_vezes_envia_uma_so():
	notificador = FakeNotificador()
	despacho = DespachoAlertas(RegistroEmMemoria(), notificador)
	venda = _venda()

	assert despacho.processar_alertas([venda]) == ["venda-1"]
	assert despacho.processar_alertas([venda]) == []

	assert notificador.chamadas == [("venda-1", ["Mesa: ALERTA: desconto excessivo"])]


def test_falha_nao_marca_e_proxima_passada_tenta_de_novo():
	notificador = FakeNotificador(falhar=True)
	registro = RegistroEmMemoria()
	despacho = DespachoAlertas(registro, notificador)
	venda = _venda()

	assert despacho.processar_alertas([venda]) == []
	assert registro.listar_enviados() == set()
	assert despacho.em_envio() == set()

	notificador.falhar = False
	assert despacho.processar_alertas([venda]) == ["venda-1"]
	assert len(notificador.chamadas) == 2
	assert registro.foi_enviado("venda-1") is True


def test_erro_de_rede_e_engolido():
	class NotificadorOffline:
		def enviar(self, venda, motivos):
			raise httpx.ConnectError("sem rede")

	despacho = DespachoAlertas(RegistroEmMemoria(), NotificadorOffline())

	assert despacho.enviar_alerta(_venda()) is False
	assert despacho.em_envio() == set()


def test_vendas_sem_alerta_ou_ja_enviadas_sao_ignoradas():
	notificador = FakeNotificador()
	registro = RegistroEmMemoria({"venda-enviada"})
	despacho = DespachoAlertas(registro, notificador)

	entregues = despacho.processar_alertas(
		[
			_venda("venda-ok", alerta="OK"),
			_venda("venda-enviada"),
			_venda("venda-nova"),
		]
	)

	assert entregues == ["venda-nova"]
	assert [venda_id for venda_id, _ in notificador.chamadas] == ["venda-nova"]


def test_mesmo_lancamento_com_ids_diferentes_gera_dois_envios():
	notificador = FakeNotificador()
	despacho = DespachoAlertas(RegistroEmMemoria(), notificador)

	despacho.processar_alertas([_venda("parte-a"), _venda("parte-b")])

	assert [venda_id for venda_id, _ in notificador.chamadas] == ["parte-a", "parte-b"]


def test_enviar_alerta_rechecagem_do_registro():
	notificador = FakeNotificador()
	despacho = DespachoAlertas(RegistroEmMemoria({"venda-1"}), notificador)

	assert despacho.enviar_alerta(_venda()) is False
	assert notificador.chamadas == []


def test_enviar_alerta_em_andamento_nao_duplica_chamada():
	liberar = threading.Event()
	iniciou = threading.Event()

	class NotificadorLento:
		def __init__(self):
			self.chamadas = 0

		def enviar(self, venda, motivos):
			self.chamadas += 1
			iniciou.set()
			liberar.wait(timeout=5)

	notificador = NotificadorLento()
	despacho = DespachoAlertas(RegistroEmMemoria(), notificador)
	venda = _venda()

	with ThreadPoolExecutor(max_workers=1) as executor:
		futuro = executor.submit(despacho.enviar_alerta, venda)
		assert iniciou.wait(timeout=5)
		assert despacho.em_envio() == {"venda-1"}

		# chamada reentrante enquanto a primeira ainda está no ar
		assert despacho.enviar_alerta(venda) is False

		liberar.set()
		assert futuro.result(timeout=5) is True

	assert notificador.chamadas == 1
	assert despacho.em_envio() == set()


def test_processar_em_segundo_plano_com_registro_persistente(tmp_path):
	notificador = FakeNotificador()
	registro = RegistroAlertasEnviados(db_path=tmp_path / "test.duckdb")
	despacho = DespachoAlertas(registro, notificador)

	with ThreadPoolExecutor(max_workers=1) as executor:
		futuro = despacho.processar_em_segundo_plano([_venda()], executor)
		assert futuro.result(timeout=10) == ["venda-1"]

	assert RegistroAlertasEnviados(db_path=tmp_path / "test.duckdb").foi_enviado("venda-1") is True


@pytest.mark.parametrize("alerta", ["OK", None, "SEM CUSTO"])
def test_enviar_alerta_sem_motivos_nao_chama_webhook(alerta):
	notificador = FakeNotificador()
	despacho = DespachoAlertas(RegistroEmMemoria(), notificador)

	assert despacho.enviar_alerta(_venda(alerta=alerta)) is False
	assert notificador.chamadas == []


def test_falha_ao_registrar_depois_do_envio_tem_log_proprio(caplog):
	class RegistroSomenteLeitura(RegistroEmMemoria):
		def marcar_enviado(self, venda_id):
			raise OSError("disco cheio")

	notificador = FakeNotificador()
	despacho = DespachoAlertas(RegistroSomenteLeitura(), notificador)

	assert despacho.enviar_alerta(_venda()) is True
	assert despacho.em_envio() == set()
	assert len(notificador.chamadas) == 1

	erros = [r.getMessage() for r in caplog.records if r.levelname == "ERROR"]
	assert len(erros) == 1
	assert "não registrado" in erros[0]
	assert "Erro ao enviar" not in erros[0]
