import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LOG_DIR_PADRAO = Path(__file__).resolve().parents[1] / "logs"
_LOG_ARQUIVO = "app.log"
_FORMATO = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _diretorio_logs() -> Path:
    # LOG_DIR permite gravar fora do checkout (ex.: volume do container)
    valor = os.getenv("LOG_DIR")
    return Path(valor) if valor else _LOG_DIR_PADRAO


def setup_logging(name: str) -> logging.Logger:
    """Logger do painel: arquivo rotativo com tudo e console a partir de LOG_LEVEL."""

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    diretorio = _diretorio_logs()
    diretorio.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(_FORMATO)

    # falhas de webhook só aparecem aqui e no console
    arquivo = RotatingFileHandler(
        diretorio / _LOG_ARQUIVO, maxBytes=5*1024*1024, backupCount=3, encoding="utf-8"
    )
    arquivo.setLevel(logging.DEBUG)
    arquivo.setFormatter(formatter)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    console.setFormatter(formatter)

    logger.addHandler(arquivo)
    logger.addHandler(console)

    return logger
