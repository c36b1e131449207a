from pathlib import Path

import pytest

import src.config as config_module
from src.config import (
	DEFAULT_DB_PATH,
	DEFAULT_FUSO_EXIBICAO,
	DEFAULT_INTERVALO_ATUALIZACAO,
	Configuracao,
	carregar_configuracao,
)

_VARIAVEIS = (
	"SUPABASE_URL",
	"SUPABASE_KEY",
	"ALERTA_WEBHOOK_URL",
	"AUDITORIA_DB_PATH",
	"ALERTAS_REGISTRO",
	"INTERVALO_ATUALIZACAO",
	"HTTP_TIMEOUT",
	"FUSO_ORIGEM",
	"FUSO_EXIBICAO",
)


@pytest.fixture(autouse=True)
def ambiente_limpo(monkeypatch):
	"""Isola os testes do `.env` local e de variáveis herdadas."""
	monkeypatch.setattr(config_module, "_ENV_LOADED", True)
	for nome in _VARIAVEIS:
		monkeypatch.delenv(nome, raising=False)


def test_configuracao_padrao():
	config = carregar_configuracao()

	assert config.supabase_url is None
	assert config.webhook_url is None
	assert config.db_path == DEFAULT_DB_PATH
	assert config.registro == "duckdb"
	assert config.intervalo_atualizacao == DEFAULT_INTERVALO_ATUALIZACAO
	assert config.fuso_origem == "UTC"
	assert config.fuso_exibicao == DEFAULT_FUSO_EXIBICAO


def test_configuracao_lida_do_ambiente(monkeypatch, tmp_path):
	monkeypatch.setenv("SUPABASE_URL", "https://projeto.supabase.test/")
	monkeypatch.setenv("SUPABASE_KEY", " chave ")
	monkeypatch.setenv("ALERTA_WEBHOOK_URL", "https://webhook.exemplo.test/alerta")
	monkeypatch.setenv("AUDITORIA_DB_PATH", str(tmp_path / "auditoria.duckdb"))
	monkeypatch.setenv("ALERTAS_REGISTRO", "MEMORIA")
	monkeypatch.setenv("INTERVALO_ATUALIZACAO", "60")
	monkeypatch.setenv("HTTP_TIMEOUT", "7,5")

	config = carregar_configuracao()

	assert config.exigir_supabase() == ("https://projeto.supabase.test", "chave")
	assert config.exigir_webhook() == "https://webhook.exemplo.test/alerta"
	assert config.db_path == Path(tmp_path / "auditoria.duckdb")
	assert config.registro == "memoria"
	assert config.intervalo_atualizacao == 60
	assert config.http_timeout == 7.5


def test_valores_invalidos_voltam_ao_padrao(monkeypatch):
	monkeypatch.setenv("ALERTAS_REGISTRO", "redis")
	monkeypatch.setenv("INTERVALO_ATUALIZACAO", "nunca")
	monkeypatch.setenv("HTTP_TIMEOUT", "-1")

	config = carregar_configuracao()

	assert config.registro == "duckdb"
	assert config.intervalo_atualizacao == DEFAULT_INTERVALO_ATUALIZACAO
	assert config.http_timeout == config_module.DEFAULT_HTTP_TIMEOUT


def test_exigir_valores_ausentes():
	config = Configuracao(supabase_url="https://projeto.supabase.test")

	with pytest.raises(RuntimeError, match="SUPABASE_KEY"):
		config.exigir_supabase()
	with pytest.raises(RuntimeError, match="ALERTA_WEBHOOK_URL"):
		config.exigir_webhook()
