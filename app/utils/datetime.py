# ============================================================
# app/utils/datetime.py
# Padronização central de datas e horários do projeto
# ============================================================

import os
import pytz
from datetime import datetime, timedelta

from flask import current_app, has_app_context

# Timezone padrão (UTC-3 - Teresina / Fortaleza), usado fora de uma app
TZ_LOCAL = pytz.timezone(os.getenv("TIMEZONE", "America/Fortaleza"))


def fuso_local():
    """Fuso de `TIMEZONE` na config da app ativa; sem app, o do ambiente."""
    if has_app_context():
        nome = current_app.config.get("TIMEZONE")
        if nome:
            return pytz.timezone(nome)
    return TZ_LOCAL


def now_local():
    """Retorna o horário atual no fuso configurado (com tzinfo)."""
    return datetime.now(tz=fuso_local())


def agora_local():
    """
    Horário local sem tzinfo, formato gravado nas colunas de data.
    As consultas por período comparam sempre contra esse mesmo relógio.
    """
    return now_local().replace(tzinfo=None)


def inicio_do_dia(referencia=None):
    referencia = referencia or agora_local()
    return referencia.replace(hour=0, minute=0, second=0, microsecond=0)


def dias_atras(dias, referencia=None):
    """Meia-noite de `dias` dias antes da data de referência."""
    return inicio_do_dia(referencia) - timedelta(days=dias)


def formatar_iso(dt):
    return dt.isoformat() if dt else None
