from decimal import Decimal

import pytest
from sqlalchemy import func
from sqlalchemy.exc import OperationalError

from app import db
from app.errors import InsufficientStock, InternalError, ProductNotFound, ValidationError
from app.produtos.models import Produto
from app.services.venda_service import VendaService
from app.vendas.models import Venda


@pytest.fixture()
def service(app):
    return VendaService(db.session)


def _quantidade(produto_id):
    return db.session.query(Produto.quantidade).filter(Produto.id == produto_id).scalar()


@pytest.mark.parametrize("estoque, pedido", [(10, 1), (10, 7), (10, 10), (1, 1)])
def test_baixa_exata_do_estoque(service, novo_produto, estoque, pedido):
    produto_id = novo_produto(quantidade=estoque).id

    venda = service.registrar_venda(produto_id, pedido, Decimal("2.00"))

    assert _quantidade(produto_id) == estoque - pedido
    vendas = db.session.query(Venda).filter(Venda.produto_id == produto_id).all()
    assert len(vendas) == 1
    assert vendas[0].id == venda.id
    assert vendas[0].quantidade == pedido
    assert vendas[0].valor_total == Decimal("2.00") * pedido


@pytest.mark.parametrize("estoque, pedido", [(0, 1), (5, 6), (7, 20)])
def test_estoque_insuficiente_nao_altera_nada(service, novo_produto, estoque, pedido):
    produto_id = novo_produto(quantidade=estoque).id

    with pytest.raises(InsufficientStock) as exc:
        service.registrar_venda(produto_id, pedido, Decimal("1.00"))

    assert exc.value.estoque_disponivel == estoque
    assert _quantidade(produto_id) == estoque
    assert db.session.query(Venda).count() == 0


def test_produto_inexistente(service):
    with pytest.raises(ProductNotFound):
        service.registrar_venda(42, 1, Decimal("1.00"))
    assert db.session.query(Venda).count() == 0


def test_falha_no_banco_desfaz_baixa(service, novo_produto, monkeypatch):
    produto_id = novo_produto(quantidade=10).id

    def commit_quebrado():
        raise OperationalError("COMMIT", {}, Exception("conexão perdida"))

    monkeypatch.setattr(db.session, "commit", commit_quebrado)

    with pytest.raises(InternalError) as exc:
        service.registrar_venda(produto_id, 3, Decimal("5.00"))
    assert "conexão perdida" in exc.value.detalhes

    monkeypatch.undo()
    assert _quantidade(produto_id) == 10
    assert db.session.query(Venda).count() == 0


def test_soma_das_vendas_bate_com_a_baixa(service, novo_produto):
    produto_id = novo_produto(quantidade=20).id

    for pedido in (3, 5, 4, 9, 2):
        try:
            service.registrar_venda(produto_id, pedido, Decimal("1.50"))
        except InsufficientStock:
            pass

    vendido = (
        db.session.query(func.coalesce(func.sum(Venda.quantidade), 0))
        .filter(Venda.produto_id == produto_id)
        .scalar()
    )
    assert vendido == 3 + 5 + 4 + 2
    assert _quantidade(produto_id) == 20 - vendido


def test_validar_dados():
    assert VendaService.validar_dados({
        "produto_id": "3",
        "quantidade": "2",
        "valor_unitario": "4,50",
    }) == (3, 2, Decimal("4.50"), None, "dinheiro")

    with pytest.raises(ValidationError):
        VendaService.validar_dados({"produto_id": 1, "quantidade": 0, "valor_unitario": 1})
    with pytest.raises(ValidationError):
        VendaService.validar_dados({"produto_id": 1, "quantidade": 1})


@pytest.mark.parametrize("quantidade, valor_unitario", [(0, "1.00"), (-3, "1.00"), (2, "-0.01")])
def test_registrar_venda_recusa_quantidade_ou_valor_invalidos(service, novo_produto, quantidade, valor_unitario):
    produto_id = novo_produto(quantidade=10).id

    with pytest.raises(ValidationError):
        service.registrar_venda(produto_id, quantidade, Decimal(valor_unitario))

    assert _quantidade(produto_id) == 10
    assert db.session.query(Venda).count() == 0
