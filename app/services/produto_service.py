# app/services/produto_service.py

import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from app.errors import Conflict, ProductNotFound, ValidationError
from app.produtos.models import Produto
from app.utils.datetime import agora_local
from app.utils.db_helpers import get_or_404
from app.utils.number_helpers import to_decimal, to_int
from app.vendas.models import Venda

logger = logging.getLogger(__name__)


def _texto(dados, campo):
    valor = dados.get(campo)
    if valor is None:
        return None
    return str(valor).strip()


def _quantidade(valor):
    quantidade = to_int(valor)
    if quantidade is None or quantidade < 0:
        raise ValidationError("Quantidade deve ser um número inteiro maior ou igual a zero")
    return quantidade


def _preco(valor, campo):
    preco = to_decimal(valor)
    if preco is None or preco < 0:
        raise ValidationError(f"Campo '{campo}' deve ser um valor numérico maior ou igual a zero")
    return preco


class ProdutoService:
    """CRUD de produtos (estoque), fora do fluxo de vendas."""

    def __init__(self, session, itens_por_pagina=50, max_itens_por_pagina=500):
        self.session = session
        self.itens_por_pagina = itens_por_pagina
        self.max_itens_por_pagina = max_itens_por_pagina

    def listar(self, termo=None, page=1, limit=None):
        """
        Lista produtos do mais novo para o mais antigo.
        `termo` busca (sem diferenciar maiúsculas) em nome e descrição.
        """
        page = max(page or 1, 1)
        limit = min(max(limit or self.itens_por_pagina, 1), self.max_itens_por_pagina)

        query = self.session.query(Produto)

        termo = (termo or "").strip()
        if termo:
            like = f"%{termo}%"
            query = query.filter(or_(Produto.nome.ilike(like), Produto.descricao.ilike(like)))

        pagination = query.order_by(Produto.id.desc()).paginate(
            page=page, per_page=limit, error_out=False, max_per_page=self.max_itens_por_pagina
        )

        return {
            "produtos": [p.to_dict() for p in pagination.items],
            "total": pagination.total,
            "page": page,
            "total_pages": pagination.pages,
        }

    def obter(self, produto_id):
        return get_or_404(self.session, Produto, produto_id, erro=ProductNotFound)

    def criar(self, dados):
        nome = _texto(dados, "nome")
        if not nome or dados.get("valor_venda") in (None, ""):
            raise ValidationError("Nome e valor de venda são obrigatórios")

        produto = Produto(
            nome=nome,
            descricao=_texto(dados, "descricao") or "",
            quantidade=_quantidade(dados["quantidade"]) if dados.get("quantidade") not in (None, "") else 0,
            valor_venda=_preco(dados["valor_venda"], "valor_venda"),
            valor_aquisicao=(
                _preco(dados["valor_aquisicao"], "valor_aquisicao")
                if dados.get("valor_aquisicao") not in (None, "")
                else 0
            ),
        )

        self.session.add(produto)
        self.session.commit()
        logger.info(f"Produto #{produto.id} '{produto.nome}' cadastrado (estoque={produto.quantidade})")
        return produto

    def atualizar(self, produto_id, dados):
        """Atualização parcial: chave ausente ou nula mantém o valor atual."""
        produto = get_or_404(self.session, Produto, produto_id, erro=ProductNotFound)

        # valida tudo antes de tocar no objeto
        novos = {}
        if dados.get("nome") is not None:
            novos["nome"] = _texto(dados, "nome")
            if not novos["nome"]:
                raise ValidationError("Nome do produto não pode ficar vazio")
        if dados.get("descricao") is not None:
            novos["descricao"] = _texto(dados, "descricao")
        if dados.get("quantidade") is not None:
            novos["quantidade"] = _quantidade(dados["quantidade"])
        for campo in ("valor_venda", "valor_aquisicao"):
            if dados.get(campo) is not None:
                novos[campo] = _preco(dados[campo], campo)

        for campo, valor in novos.items():
            setattr(produto, campo, valor)
        produto.atualizado_em = agora_local()

        self.session.commit()
        logger.info(f"Produto #{produto.id} atualizado: {', '.join(novos) or 'nenhum campo'}")
        return produto

    def _total_vendas(self, produto_id):
        return (
            self.session.query(func.count(Venda.id))
            .filter(Venda.produto_id == produto_id)
            .scalar()
        )

    def excluir(self, produto_id):
        """
        Exclui produto sem vendas.
        A linha fica travada (mesma trava do registro de venda) entre a
        contagem e o DELETE; a FK RESTRICT em vendas barra o que escapar.
        """
        produto = (
            self.session.query(Produto)
            .filter(Produto.id == produto_id)
            .with_for_update()
            .one_or_none()
        )
        if produto is None:
            self.session.rollback()
            raise ProductNotFound()

        total_vendas = self._total_vendas(produto.id)
        if total_vendas:
            self.session.rollback()
            raise Conflict(
                "Não é possível excluir produto com vendas registradas",
                total_vendas=int(total_vendas),
            )

        try:
            self.session.delete(produto)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Exclusão do produto #{produto_id} barrada pelo banco: {e.orig}")
            raise Conflict("Não é possível excluir produto com vendas registradas") from e

        logger.info(f"Produto #{produto_id} excluído")
