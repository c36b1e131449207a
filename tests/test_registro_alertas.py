from src.auditoria.registro import (
	CHAVE_ALERTAS_ENVIADOS,
	RegistroAlertasEnviados,
	RegistroEmMemoria,
)
from src.database import gravar_valor, ler_valor


def test_registro_vazio_nao_tem_envios(tmp_path):
	registro = RegistroAlertasEnviados(db_path=tmp_path / "test.duckdb")

	assert registro.foi_enviado("venda-1") is False
	assert registro.listar_enviados() == set()


def test_marcar_enviado_persiste_entre_instancias(tmp_path):
	db_path = tmp_path / "test.duckdb"
	RegistroAlertasEnviados(db_path=db_path).marcar_enviado("venda-1")

	outro = RegistroAlertasEnviados(db_path=db_path)
	assert outro.foi_enviado("venda-1") is True
	assert outro.foi_enviado("venda-2") is False


def test_marcar_enviado_e_idempotente(tmp_path):
	db_path = tmp_path / "test.duckdb"
	registro = RegistroAlertasEnviados(db_path=db_path)

	registro.marcar_enviado("venda-1")
	registro.marcar_enviado("venda-1")
	registro.marcar_enviado("venda-2")

	assert registro.listar_enviados() == {"venda-1", "venda-2"}
	assert ler_valor(CHAVE_ALERTAS_ENVIADOS, db_path=db_path) == '["venda-1", "venda-2"]'


def test_registro_corrompido_conta_como_vazio(tmp_path):
	db_path = tmp_path / "test.duckdb"
	gravar_valor(CHAVE_ALERTAS_ENVIADOS, "{isso nao e json", db_path=db_path)
	registro = RegistroAlertasEnviados(db_path=db_path)

	assert registro.foi_enviado("venda-1") is False

	# a próxima marcação sobrescreve o valor corrompido
	registro.marcar_enviado("venda-1")
	assert registro.listar_enviados() == {"venda-1"}


def test_registro_que_nao_e_lista_conta_como_vazio(tmp_path):
	db_path = tmp_path / "test.duckdb"
	gravar_valor(CHAVE_ALERTAS_ENVIADOS, '{"venda-1": true}', db_path=db_path)

	assert RegistroAlertasEnviados(db_path=db_path).foi_enviado("venda-1") is False


def test_arquivo_de_banco_ilegivel_nao_quebra_consulta(tmp_path):
	db_path = tmp_path / "corrompido.duckdb"
	db_path.write_bytes(b"isto nao e um arquivo duckdb" * 100)

	assert RegistroAlertasEnviados(db_path=db_path).foi_enviado("venda-1") is False


def test_registro_em_memoria():
	registro = RegistroEmMemoria({"venda-1"})
	registro.marcar_enviado("venda-2")

	assert registro.foi_enviado("venda-1") is True
	assert registro.listar_enviados() == {"venda-1", "venda-2"}
