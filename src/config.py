"""Configuração da aplicação lida do ambiente e do arquivo `.env`."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from typing import Callable, cast
import os

from src.logger import setup_logging

logger = setup_logging("config")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DB_PATH = PROJECT_ROOT / "data" / "auditoria.duckdb"
DEFAULT_INTERVALO_ATUALIZACAO = 300
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_FUSO_ORIGEM = "UTC"
DEFAULT_FUSO_EXIBICAO = "America/Sao_Paulo"
REGISTROS_SUPORTADOS = ("duckdb", "memoria")
_ENV_LOADED = False

LoadDotenvCallable = Callable[..., bool]
_LOAD_DOTENV_FUNC: LoadDotenvCallable | None = None


def _get_load_dotenv() -> LoadDotenvCallable:
	global _LOAD_DOTENV_FUNC
	if _LOAD_DOTENV_FUNC is not None:
		return _LOAD_DOTENV_FUNC
	try:
		module = import_module("dotenv")
	except ModuleNotFoundError as exc:
		raise RuntimeError(
			"A biblioteca python-dotenv não está instalada. Execute 'pip install python-dotenv'."
		) from exc
	load_func = getattr(module, "load_dotenv", None)
	if not callable(load_func):
		raise RuntimeError("A instalação python-dotenv não expôs a função load_dotenv().")
	load_callable = cast(LoadDotenvCallable, load_func)
	_LOAD_DOTENV_FUNC = load_callable
	return load_callable


def _ensure_env() -> None:
	global _ENV_LOADED
	if _ENV_LOADED:
		return
	load_dotenv_func = _get_load_dotenv()
	env_path = PROJECT_ROOT / ".env"
	if env_path.exists():
		load_dotenv_func(dotenv_path=str(env_path), override=False)
	else:
		load_dotenv_func(override=False)
	_ENV_LOADED = True


@dataclass(frozen=True, slots=True)
class Configuracao:
	supabase_url: str | None = None
	supabase_chave: str | None = None
	webhook_url: str | None = None
	db_path: Path = DEFAULT_DB_PATH
	registro: str = "duckdb"
	intervalo_atualizacao: int = DEFAULT_INTERVALO_ATUALIZACAO
	http_timeout: float = DEFAULT_HTTP_TIMEOUT
	fuso_origem: str = DEFAULT_FUSO_ORIGEM
	fuso_exibicao: str = DEFAULT_FUSO_EXIBICAO

	def exigir_supabase(self) -> tuple[str, str]:
		if not self.supabase_url:
			raise RuntimeError("Configure a variável SUPABASE_URL no ambiente ou arquivo .env")
		if not self.supabase_chave:
			raise RuntimeError("Configure a variável SUPABASE_KEY no ambiente ou arquivo .env")
		return self.supabase_url.rstrip("/"), self.supabase_chave

	def exigir_webhook(self) -> str:
		if not self.webhook_url:
			raise RuntimeError("Configure a variável ALERTA_WEBHOOK_URL no ambiente ou arquivo .env")
		return self.webhook_url


def carregar_configuracao() -> Configuracao:
	"""Monta a configuração a partir do `.env` e das variáveis de ambiente."""

	_ensure_env()
	registro = (os.getenv("ALERTAS_REGISTRO") or "duckdb").strip().lower()
	if registro not in REGISTROS_SUPORTADOS:
		logger.warning("ALERTAS_REGISTRO=%s não suportado, usando duckdb.", registro)
		registro = "duckdb"

	db_path_env = os.getenv("AUDITORIA_DB_PATH")
	return Configuracao(
		supabase_url=_texto_env("SUPABASE_URL"),
		supabase_chave=_texto_env("SUPABASE_KEY"),
		webhook_url=_texto_env("ALERTA_WEBHOOK_URL"),
		db_path=Path(db_path_env) if db_path_env else DEFAULT_DB_PATH,
		registro=registro,
		intervalo_atualizacao=int(
			_numero_env("INTERVALO_ATUALIZACAO", DEFAULT_INTERVALO_ATUALIZACAO)
		),
		http_timeout=_numero_env("HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
		fuso_origem=_texto_env("FUSO_ORIGEM") or DEFAULT_FUSO_ORIGEM,
		fuso_exibicao=_texto_env("FUSO_EXIBICAO") or DEFAULT_FUSO_EXIBICAO,
	)


def _texto_env(nome: str) -> str | None:
	valor = os.getenv(nome)
	if valor is None:
		return None
	texto = valor.strip()
	return texto or None


def _numero_env(nome: str, padrao: float) -> float:
	texto = _texto_env(nome)
	if texto is None:
		return padrao
	try:
		numero = float(texto.replace(",", "."))
	except ValueError:
		logger.warning("Valor inválido para %s: %r. Usando %s.", nome, texto, padrao)
		return padrao
	if numero <= 0:
		logger.warning("%s deve ser positivo, recebido %s. Usando %s.", nome, numero, padrao)
		return padrao
	return numero
