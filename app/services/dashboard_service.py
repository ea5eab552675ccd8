# app/services/dashboard_service.py

from datetime import timedelta
from decimal import Decimal

from sqlalchemy import case, extract, func

from app.produtos.models import Produto
from app.services.periodo import Periodo
from app.utils.datetime import agora_local, dias_atras, inicio_do_dia
from app.utils.number_helpers import to_float
from app.vendas.models import Venda

# Quando não há vendas no período o card "melhor período" mostra meio-dia
HORA_PADRAO_SEM_VENDAS = 12


class DashboardService:
    """
    Agregados somente-leitura para o dashboard.

    Cada método faz uma consulta independente; não há garantia de que todas
    enxerguem o mesmo instante do banco.
    """

    def __init__(self, session, estoque_minimo=20, margem_lucro=0.4, agora=None):
        self.session = session
        self.estoque_minimo = estoque_minimo
        self.margem_lucro = Decimal(str(margem_lucro))
        self._agora = agora or agora_local

    def _filtro(self, periodo):
        return periodo.filtro(Venda.data_venda, self._agora())

    # ============================
    # Vendas do período
    # ============================

    def resumo_vendas(self, periodo=Periodo.HOJE):
        total_vendas, faturamento, ticket_medio = (
            self.session.query(
                func.count(Venda.id),
                func.coalesce(func.sum(Venda.valor_total), 0),
                func.coalesce(func.avg(Venda.valor_total), 0),
            )
            .filter(self._filtro(periodo))
            .one()
        )

        faturamento = Decimal(str(faturamento or 0))
        # Lucro estimado com margem fixa, não usa o custo de aquisição
        lucro = faturamento * self.margem_lucro

        return {
            "total_vendas": int(total_vendas or 0),
            "faturamento": float(faturamento),
            "ticket_medio": to_float(ticket_medio),
            "lucro_estimado": float(lucro),
        }

    # ============================
    # Estoque
    # ============================

    def resumo_estoque(self):
        total_cadastrados, total_estoque, criticos = self.session.query(
            func.count(Produto.id),
            func.coalesce(func.sum(Produto.quantidade), 0),
            func.coalesce(
                func.sum(case((Produto.quantidade < self.estoque_minimo, 1), else_=0)), 0
            ),
        ).one()

        return {
            "total_cadastrados": int(total_cadastrados or 0),
            "total_estoque": int(total_estoque or 0),
            "estoque_criticos": int(criticos or 0),
        }

    def baixo_estoque(self, limit=10):
        produtos = (
            self.session.query(Produto.id, Produto.nome, Produto.quantidade, Produto.valor_venda)
            .filter(Produto.quantidade < self.estoque_minimo)
            .order_by(Produto.quantidade.asc(), Produto.id.asc())
            .limit(limit)
            .all()
        )
        return [
            {
                "id": p.id,
                "nome": p.nome,
                "quantidade": p.quantidade,
                "valor_venda": to_float(p.valor_venda),
            }
            for p in produtos
        ]

    # ============================
    # Rankings e séries
    # ============================

    def produtos_mais_vendidos(self, periodo=Periodo.HOJE, limit=5):
        total_vendido = func.sum(Venda.quantidade).label("total_vendido")
        linhas = (
            self.session.query(
                Produto.id,
                Produto.nome,
                total_vendido,
                func.sum(Venda.valor_total).label("faturamento_total"),
            )
            .select_from(Venda)
            .join(Produto, Venda.produto_id == Produto.id)
            .filter(self._filtro(periodo))
            .group_by(Produto.id, Produto.nome)
            .order_by(total_vendido.desc(), Produto.id.asc())
            .limit(limit)
            .all()
        )
        return [
            {
                "produto_id": linha.id,
                "nome": linha.nome,
                "total_vendido": int(linha.total_vendido or 0),
                "faturamento_total": to_float(linha.faturamento_total),
            }
            for linha in linhas
        ]

    def horario_pico(self, periodo=Periodo.HOJE):
        """Hora (0-23) com mais vendas; empate fica com a hora mais cedo."""
        hora = extract("hour", Venda.data_venda)
        linhas = (
            self.session.query(
                hora.label("hora"),
                func.count(Venda.id).label("total_vendas"),
                func.coalesce(func.sum(Venda.valor_total), 0).label("faturamento"),
            )
            .filter(self._filtro(periodo))
            .group_by(hora)
            .order_by(hora.asc())
            .all()
        )
        if not linhas:
            return {"hora": HORA_PADRAO_SEM_VENDAS, "total_vendas": 0, "faturamento": 0.0}

        # max() devolve o primeiro maior, preservando a ordem por hora
        pico = max(linhas, key=lambda linha: linha.total_vendas)
        return {
            "hora": int(pico.hora),
            "total_vendas": int(pico.total_vendas),
            "faturamento": to_float(pico.faturamento),
        }

    def vendas_por_dia(self, dias=7):
        """Uma entrada por dia com vendas nos últimos `dias` dias (hoje incluso)."""
        dias = max(int(dias), 1)
        agora = self._agora()
        dia = func.date(Venda.data_venda)
        linhas = (
            self.session.query(
                dia.label("data"),
                func.count(Venda.id).label("total_vendas"),
                func.coalesce(func.sum(Venda.valor_total), 0).label("faturamento"),
            )
            .filter(Venda.data_venda >= dias_atras(dias - 1, agora))
            .filter(Venda.data_venda < inicio_do_dia(agora) + timedelta(days=1))
            .group_by(dia)
            .order_by(dia.desc())
            .limit(dias)
            .all()
        )
        return [
            {
                "data": str(linha.data),
                "vendas": int(linha.total_vendas or 0),
                "faturamento": to_float(linha.faturamento),
            }
            for linha in linhas
        ]

    def ultimas_vendas(self, limit=5):
        vendas = (
            self.session.query(Venda)
            .order_by(Venda.data_venda.desc(), Venda.id.desc())
            .limit(limit)
            .all()
        )
        return [v.to_dict() for v in vendas]

    # ============================
    # Resposta completa do /dashboard
    # ============================

    def montar_dashboard(self, periodo=Periodo.HOJE):
        vendas = self.resumo_vendas(periodo)
        estoque = self.resumo_estoque()
        mais_vendidos = self.produtos_mais_vendidos(periodo)
        pico = self.horario_pico(periodo)

        produto_do_dia = None
        if mais_vendidos:
            top = mais_vendidos[0]
            produto_do_dia = {
                "nome": top["nome"],
                "vendas": top["total_vendido"],
                "faturamento": top["faturamento_total"],
            }

        return {
            "periodo": periodo.value,

            # Cards principais
            "vendas_hoje": vendas["total_vendas"],
            "faturamento_hoje": vendas["faturamento"],
            "ticket_medio": vendas["ticket_medio"],
            "lucro_hoje": vendas["lucro_estimado"],

            # Estoque
            "total_estoque": estoque["total_estoque"],
            "total_cadastrados": estoque["total_cadastrados"],
            "estoque_criticos": estoque["estoque_criticos"],

            # Listas
            "baixo_estoque": self.baixo_estoque(),
            "ultimas_vendas": self.ultimas_vendas(),
            "produtos_mais_vendidos": mais_vendidos,

            # Análises
            "produto_do_dia": produto_do_dia,
            "melhor_periodo": {"hora": pico["hora"], "total_vendas": pico["total_vendas"]},

            # Gráficos
            "vendas_por_dia": self.vendas_por_dia(7),
        }
