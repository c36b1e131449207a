"""Detecção de alertas de auditoria e envio único ao webhook externo."""

from .classificador import item_tem_alerta, itens_com_alerta, motivos_alerta, venda_tem_alerta
from .despacho import DespachoAlertas
from .registro import CHAVE_ALERTAS_ENVIADOS, RegistroAlertasEnviados, RegistroEmMemoria
from .webhook import ErroWebhook, WebhookNotifier, montar_payload

__all__ = [
	"CHAVE_ALERTAS_ENVIADOS",
	"DespachoAlertas",
	"ErroWebhook",
	"RegistroAlertasEnviados",
	"RegistroEmMemoria",
	"WebhookNotifier",
	"item_tem_alerta",
	"itens_com_alerta",
	"montar_payload",
	"motivos_alerta",
	"venda_tem_alerta",
]
