"""Camada de persistência local em DuckDB.

O painel não guarda vendas localmente: elas vêm sempre do Supabase. O que
fica no DuckDB é o estado que precisa sobreviver a reinícios da aplicação,
como o registro de alertas já enviados ao webhook. Esse estado é guardado
numa tabela chave/valor simples, onde cada chave tem um único valor textual
(normalmente JSON) reescrito por inteiro a cada gravação."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import duckdb

from src.logger import setup_logging

logger = setup_logging("database")

_BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DB_PATH = _BASE_DIR / "data" / "auditoria.duckdb"

_SCHEMA_DEFINITIONS: tuple[str, ...] = (
	"""
	CREATE TABLE IF NOT EXISTS armazenamento_local (
		chave VARCHAR PRIMARY KEY,
		valor TEXT,
		atualizado_em TIMESTAMP DEFAULT CURRENT_TIMESTAMP
	)
	""",
)


def _resolver_caminho_banco(db_path: Path | str | None = None) -> Path:
	caminho = Path(db_path) if db_path is not None else DEFAULT_DB_PATH
	caminho.parent.mkdir(parents=True, exist_ok=True)
	return caminho


def _aplicar_schema(con: duckdb.DuckDBPyConnection) -> None:
	for ddl in _SCHEMA_DEFINITIONS:
		con.execute(ddl)


@contextmanager
def conexao(db_path: Path | str | None = None) -> Iterator[duckdb.DuckDBPyConnection]:
	"""Abre uma conexão com o DuckDB garantindo que o schema exista."""

	con = duckdb.connect(str(_resolver_caminho_banco(db_path)))
	try:
		_aplicar_schema(con)
		yield con
	except duckdb.Error as e:
		logger.error(f"Erro no banco de dados: {e}")
		raise
	finally:
		con.close()


def inicializar_banco(db_path: Path | str | None = None) -> duckdb.DuckDBPyConnection:
	"""Garante o arquivo e a tabela chave/valor antes do primeiro alerta.

	Chamado uma vez por sessão do painel; a conexão devolvida fica a cargo
	de quem chamou."""

	caminho = _resolver_caminho_banco(db_path)
	con = duckdb.connect(str(caminho))
	_aplicar_schema(con)
	logger.info("Armazenamento local pronto em %s", caminho)
	return con


def ler_valor(chave: str, *, db_path: Path | str | None = None) -> Optional[str]:
	with conexao(db_path) as con:
		row = con.execute(
			"SELECT valor FROM armazenamento_local WHERE chave = ?",
			[chave],
		).fetchone()
	if row is None:
		return None
	return row[0]


def gravar_valor(chave: str, valor: str, *, db_path: Path | str | None = None) -> None:
	"""Sobrescreve o valor da chave (último a gravar vence)."""

	with conexao(db_path) as con:
		con.execute(
			"""
			INSERT INTO armazenamento_local (chave, valor, atualizado_em)
			VALUES (?, ?, CURRENT_TIMESTAMP)
			ON CONFLICT (chave) DO UPDATE SET
				valor = excluded.valor,
				atualizado_em = excluded.atualizado_em
			""",
			[chave, valor],
		)


__all__ = [
	"DEFAULT_DB_PATH",
	"conexao",
	"inicializar_banco",
	"ler_valor",
	"gravar_valor",
]
