import logging

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError

from app.errors import ApiError, InsufficientStock, InternalError, ProductNotFound, ValidationError
from app.produtos.models import Produto
from app.services.periodo import Periodo
from app.utils.datetime import agora_local
from app.utils.number_helpers import arredondar_moeda, to_decimal, to_float, to_int
from app.vendas.models import FORMA_PAGAMENTO_PADRAO, Venda

logger = logging.getLogger(__name__)


def _validar_quantidade_e_valor(quantidade, valor_unitario):
    if quantidade <= 0:
        raise ValidationError("Quantidade deve ser maior que zero")
    if valor_unitario < 0:
        raise ValidationError("Valor unitário não pode ser negativo")


class VendaService:
    def __init__(self, session, itens_por_pagina=50, max_itens_por_pagina=500):
        self.session = session
        self.itens_por_pagina = itens_por_pagina
        self.max_itens_por_pagina = max_itens_por_pagina

    @staticmethod
    def validar_dados(dados):
        """
        Normaliza o corpo de uma nova venda.
        Retorna (produto_id, quantidade, valor_unitario, produto_nome, forma_pagamento).
        """
        produto_id = to_int(dados.get("produto_id"))
        quantidade = to_int(dados.get("quantidade"))
        valor_unitario = to_decimal(dados.get("valor_unitario"))

        if produto_id is None or quantidade is None or valor_unitario is None:
            raise ValidationError("Campos obrigatórios não preenchidos")
        _validar_quantidade_e_valor(quantidade, valor_unitario)

        produto_nome = (str(dados.get("produto_nome") or "")).strip() or None
        forma_pagamento = (str(dados.get("forma_pagamento") or "")).strip() or FORMA_PAGAMENTO_PADRAO
        return produto_id, quantidade, valor_unitario, produto_nome, forma_pagamento

    def registrar_venda(self, produto_id, quantidade, valor_unitario, produto_nome=None,
                        forma_pagamento=None, valor_total_informado=None):
        """
        Registra uma venda e dá baixa no estoque na mesma transação.

        1. Trava a linha do produto (SELECT ... FOR UPDATE)
        2. Produto inexistente -> ProductNotFound
        3. Estoque menor que a quantidade -> InsufficientStock
        4. Baixa o estoque (UPDATE condicionado a quantidade >= pedida)
        5. Grava a venda com valor_total calculado aqui
        6. Commit; qualquer falha desfaz tudo
        """
        quantidade = to_int(quantidade)
        valor_unitario = to_decimal(valor_unitario)
        if quantidade is None or valor_unitario is None:
            raise ValidationError("Campos obrigatórios não preenchidos")
        _validar_quantidade_e_valor(quantidade, valor_unitario)

        valor_unitario = arredondar_moeda(valor_unitario)
        valor_total = arredondar_moeda(valor_unitario * quantidade)

        if valor_total_informado is not None:
            informado = to_decimal(valor_total_informado)
            if informado is None or arredondar_moeda(informado) != valor_total:
                logger.warning(
                    f"valor_total informado ({valor_total_informado}) difere do calculado "
                    f"({valor_total}) para produto #{produto_id}; usando o calculado"
                )

        try:
            produto = (
                self.session.query(Produto)
                .filter(Produto.id == produto_id)
                .with_for_update()
                .one_or_none()
            )
            if produto is None:
                raise ProductNotFound()

            if produto.quantidade < quantidade:
                raise InsufficientStock(produto.quantidade)

            resultado = self.session.execute(
                update(Produto)
                .where(Produto.id == produto_id, Produto.quantidade >= quantidade)
                .values(quantidade=Produto.quantidade - quantidade, atualizado_em=agora_local())
                .execution_options(synchronize_session=False)
            )
            if resultado.rowcount != 1:
                # sem trava de linha (SQLite) outra venda pode ter levado o estoque
                disponivel = (
                    self.session.query(Produto.quantidade)
                    .filter(Produto.id == produto_id)
                    .scalar()
                )
                raise InsufficientStock(disponivel or 0)

            venda = Venda(
                produto_id=produto.id,
                produto_nome=produto_nome or produto.nome,
                quantidade=quantidade,
                valor_unitario=valor_unitario,
                valor_total=valor_total,
                forma_pagamento=forma_pagamento or FORMA_PAGAMENTO_PADRAO,
            )
            self.session.add(venda)
            self.session.commit()

        except ApiError as e:
            self.session.rollback()
            logger.info(f"Venda recusada para produto #{produto_id}: {e.mensagem}")
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception(f"Falha ao registrar venda do produto #{produto_id}")
            raise InternalError(detalhes=str(e)) from e
        except Exception:
            self.session.rollback()
            raise

        logger.info(
            f"Venda #{venda.id} registrada: {quantidade}x '{venda.produto_nome}' "
            f"= {valor_total} ({venda.forma_pagamento})"
        )
        return venda

    def criar_de_requisicao(self, dados):
        produto_id, quantidade, valor_unitario, produto_nome, forma_pagamento = self.validar_dados(dados)
        return self.registrar_venda(
            produto_id,
            quantidade,
            valor_unitario,
            produto_nome=produto_nome,
            forma_pagamento=forma_pagamento,
            valor_total_informado=dados.get("valor_total"),
        )

    def listar(self, periodo=None, page=1, limit=None, agora=None):
        """Vendas mais recentes primeiro, com estatísticas do mesmo período."""
        page = max(page or 1, 1)
        limit = min(max(limit or self.itens_por_pagina, 1), self.max_itens_por_pagina)

        filtros = [periodo.filtro(Venda.data_venda, agora)] if periodo else []

        pagination = (
            self.session.query(Venda)
            .filter(*filtros)
            .order_by(Venda.data_venda.desc(), Venda.id.desc())
            .paginate(page=page, per_page=limit, error_out=False, max_per_page=self.max_itens_por_pagina)
        )

        total_vendas, faturamento, ticket_medio = (
            self.session.query(
                func.count(Venda.id),
                func.coalesce(func.sum(Venda.valor_total), 0),
                func.coalesce(func.avg(Venda.valor_total), 0),
            )
            .filter(*filtros)
            .one()
        )

        return {
            "periodo": periodo.value if isinstance(periodo, Periodo) else None,
            "vendas": [v.to_dict() for v in pagination.items],
            "total": pagination.total,
            "page": page,
            "total_pages": pagination.pages,
            "estatisticas": {
                "total_vendas": int(total_vendas or 0),
                "faturamento_total": to_float(faturamento),
                "ticket_medio": to_float(ticket_medio),
            },
        }
