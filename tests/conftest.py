from decimal import Decimal

import pytest
from app import create_app, db
from app.config_test import TestConfig
from app.produtos.models import Produto
from app.vendas.models import Venda


@pytest.fixture()
def app():
    """Cria uma instância da aplicação só para os testes (banco em memória)."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    """Cliente de teste para simular requests."""
    return app.test_client()


@pytest.fixture()
def novo_produto(app):
    """Grava um produto direto no banco e devolve o objeto."""
    def _criar(nome="Widget", quantidade=10, valor_venda="5.00", **campos):
        produto = Produto(
            nome=nome,
            quantidade=quantidade,
            valor_venda=Decimal(str(valor_venda)),
            **campos,
        )
        db.session.add(produto)
        db.session.commit()
        return produto

    return _criar


@pytest.fixture()
def venda_em(app):
    """Grava uma venda com data definida (sem mexer no estoque), para relatórios."""
    def _criar(produto, quantidade, valor_unitario, data_venda, forma_pagamento="dinheiro"):
        valor_unitario = Decimal(str(valor_unitario))
        venda = Venda(
            produto_id=produto.id,
            produto_nome=produto.nome,
            quantidade=quantidade,
            valor_unitario=valor_unitario,
            valor_total=valor_unitario * quantidade,
            forma_pagamento=forma_pagamento,
            data_venda=data_venda,
        )
        db.session.add(venda)
        db.session.commit()
        return venda

    return _criar
