from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
import traceback

import streamlit as st

from src.auditoria import DespachoAlertas, RegistroAlertasEnviados, RegistroEmMemoria, WebhookNotifier
from src.config import Configuracao, carregar_configuracao
from src.database import inicializar_banco
from src.fontes import buscar_vendas
from src.logger import setup_logging
from src.ui import render_painel

logger = setup_logging("main")


@st.cache_resource
def _obter_despacho(_config: Configuracao) -> DespachoAlertas:
	if _config.registro == "memoria":
		registro = RegistroEmMemoria()
	else:
		registro = RegistroAlertasEnviados(db_path=_config.db_path)
	notificador = WebhookNotifier(_config.exigir_webhook(), timeout=_config.http_timeout)
	logger.info("Despacho de alertas criado (registro: %s)", _config.registro)
	return DespachoAlertas(registro, notificador)


@st.cache_resource
def _obter_executor() -> ThreadPoolExecutor:
	return ThreadPoolExecutor(max_workers=1, thread_name_prefix="alertas")


def _carregar_vendas(config: Configuracao, *, forcar: bool = False) -> None:
	ultima = st.session_state.get("vendas_atualizadas_em")
	vencido = ultima is None or (datetime.now() - ultima).total_seconds() >= config.intervalo_atualizacao
	if not forcar and not vencido and "vendas" in st.session_state:
		return

	with st.spinner("Carregando vendas..."):
		vendas = buscar_vendas(config=config)
	st.session_state["vendas"] = vendas
	st.session_state["vendas_atualizadas_em"] = datetime.now()

	# cada carga nova é uma passada de conciliação dos alertas
	if not vendas:
		return
	if not config.webhook_url:
		logger.warning("ALERTA_WEBHOOK_URL não configurada; alertas não serão enviados.")
		return
	_obter_despacho(config).processar_em_segundo_plano(vendas, _obter_executor())


def main() -> None:
	try:
		logger.info("Iniciando painel de Auditoria de Vendas")
		st.set_page_config(page_title="Auditoria de Vendas", layout="wide")
		config = carregar_configuracao()

		if config.registro == "duckdb" and "banco_inicializado" not in st.session_state:
			try:
				inicializar_banco(config.db_path).close()
				st.session_state["banco_inicializado"] = True
			except Exception as e:
				logger.exception(f"Erro na inicialização do banco: {e}")
				st.error("Erro ao abrir o registro local de alertas.")
				return

		col_titulo, col_atualizar = st.columns([5, 1])
		with col_titulo:
			st.title("Auditoria de Vendas")
			st.caption("Análise de tabelas de preço, descontos e comissão")
		with col_atualizar:
			atualizar = st.button("Atualizar", type="primary")

		try:
			_carregar_vendas(config, forcar=atualizar)
		except Exception as e:
			logger.exception(f"Erro ao carregar vendas: {e}")
			st.error(f"Erro ao carregar dados: {e}")
			st.stop()

		if atualizar:
			st.toast("Dados atualizados com sucesso!")

		atualizadas_em = st.session_state["vendas_atualizadas_em"]
		with col_atualizar:
			st.caption(f"Última atualização: {atualizadas_em:%d/%m/%Y às %H:%M:%S}")

		render_painel(st.session_state["vendas"], config)

	except Exception as e:
		logger.exception(f"Erro crítico na aplicação: {e}\n{traceback.format_exc()}")
		st.error(f"❌ Erro inesperado na aplicação: {e}")
		st.exception(e)


if __name__ == "__main__":
	main()
