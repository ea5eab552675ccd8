# app/services/periodo.py

import enum
from datetime import timedelta

from sqlalchemy import and_

from app.utils.datetime import agora_local, dias_atras, inicio_do_dia


class Periodo(enum.Enum):
    """Janela de tempo usada nos relatórios e na listagem de vendas."""

    HOJE = "hoje"
    SEMANA = "semana"
    MES = "mes"

    @classmethod
    def parse(cls, valor, padrao=None):
        """
        Converte o parâmetro `periodo` da query string.
        Valores desconhecidos ou vazios caem no `padrao` (que pode ser None,
        significando "sem filtro").
        """
        if valor is None:
            return padrao
        chave = str(valor).strip().lower()
        return _ALIASES.get(chave, padrao)

    def filtro(self, coluna, agora=None):
        """Predicado parametrizado sobre a coluna de data."""
        agora = agora or agora_local()
        if self is Periodo.HOJE:
            inicio = inicio_do_dia(agora)
            return and_(coluna >= inicio, coluna < inicio + timedelta(days=1))
        return coluna >= dias_atras(_DIAS[self], agora)


_DIAS = {
    Periodo.SEMANA: 7,
    Periodo.MES: 30,
}

_ALIASES = {
    "hoje": Periodo.HOJE,
    "dia": Periodo.HOJE,
    "today": Periodo.HOJE,
    "semana": Periodo.SEMANA,
    "week": Periodo.SEMANA,
    "7d": Periodo.SEMANA,
    "mes": Periodo.MES,
    "mês": Periodo.MES,
    "month": Periodo.MES,
    "30d": Periodo.MES,
}
