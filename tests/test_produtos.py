import pytest

from app import db
from app.errors import Conflict
from app.produtos.models import Produto
from app.services.produto_service import ProdutoService
from app.utils.datetime import agora_local
from app.vendas.models import Venda


def test_listar_produtos_vazio(client):
    resp = client.get("/produtos")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["produtos"] == []
    assert data["total"] == 0
    assert data["page"] == 1
    assert data["total_pages"] == 0


def test_criar_produto(client):
    resp = client.post("/produtos", json={
        "nome": "Widget",
        "descricao": "Peça de reposição",
        "quantidade": 10,
        "valor_venda": "5.00",
        "valor_aquisicao": 3,
    })
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["id"] is not None
    assert data["nome"] == "Widget"
    assert data["quantidade"] == 10
    assert data["valor_venda"] == 5.0
    assert data["valor_aquisicao"] == 3.0
    assert data["atualizado_em"] is not None


def test_criar_produto_campos_numericos_padrao_zero(client):
    resp = client.post("/produtos", json={"nome": "Caneta", "valor_venda": 2.5})
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["quantidade"] == 0
    assert data["valor_aquisicao"] == 0.0
    assert data["descricao"] == ""


def test_criar_produto_sem_nome_ou_valor(client):
    resp = client.post("/produtos", json={"valor_venda": 10})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Nome e valor de venda são obrigatórios"

    resp = client.post("/produtos", json={"nome": "Sem preço"})
    assert resp.status_code == 400


def test_criar_produto_quantidade_negativa(client):
    resp = client.post("/produtos", json={"nome": "X", "valor_venda": 1, "quantidade": -3})
    assert resp.status_code == 400


def test_criar_produto_corpo_invalido(client):
    resp = client.post("/produtos", json=["nao", "e", "objeto"])
    assert resp.status_code == 400


def test_busca_sem_diferenciar_maiusculas(client, novo_produto):
    novo_produto(nome="Parafuso Sextavado")
    novo_produto(nome="Porca", descricao="serve no PARAFUSO M8")
    novo_produto(nome="Arruela")

    resp = client.get("/produtos?search=parafuso")
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["total"] == 2
    assert {p["nome"] for p in data["produtos"]} == {"Parafuso Sextavado", "Porca"}


def test_paginacao_produtos(client, novo_produto):
    for i in range(5):
        novo_produto(nome=f"Produto {i}")

    resp = client.get("/produtos?page=2&limit=2")
    data = resp.get_json()
    assert data["total"] == 5
    assert data["total_pages"] == 3
    assert data["page"] == 2
    # mais novo primeiro: página 2 traz o 3º e o 2º cadastrados
    assert [p["nome"] for p in data["produtos"]] == ["Produto 2", "Produto 1"]


def test_obter_produto(client, novo_produto):
    produto = novo_produto(nome="Widget")
    resp = client.get(f"/produtos/{produto.id}")
    assert resp.status_code == 200
    assert resp.get_json()["nome"] == "Widget"

    resp = client.get("/produtos/9999")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Produto não encontrado"


def test_atualizar_produto_parcial(client, novo_produto):
    produto = novo_produto(nome="Widget", quantidade=10, valor_venda="5.00", descricao="original")
    produto_id = produto.id

    resp = client.put(f"/produtos?id={produto_id}", json={"valor_venda": "6.50"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["valor_venda"] == 6.5
    # campos não enviados continuam iguais
    assert data["nome"] == "Widget"
    assert data["quantidade"] == 10
    assert data["descricao"] == "original"


def test_atualizar_quantidade_para_zero(client, novo_produto):
    produto = novo_produto(quantidade=4)
    resp = client.put(f"/produtos/{produto.id}", json={"quantidade": 0})
    assert resp.status_code == 200
    assert resp.get_json()["quantidade"] == 0


def test_atualizar_produto_inexistente(client):
    resp = client.put("/produtos?id=404", json={"nome": "Nada"})
    assert resp.status_code == 404


def test_atualizar_produto_sem_id(client):
    resp = client.put("/produtos", json={"nome": "Nada"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "ID do produto é obrigatório"


def test_atualizar_produto_valor_invalido_nao_altera(client, app, novo_produto):
    produto = novo_produto(nome="Widget", quantidade=10)
    produto_id = produto.id

    resp = client.put(f"/produtos/{produto_id}", json={"nome": "Outro", "quantidade": "abc"})
    assert resp.status_code == 400

    produto = db.session.get(Produto, produto_id)
    assert produto.nome == "Widget"
    assert produto.quantidade == 10


def test_excluir_produto_sem_vendas(client, novo_produto):
    produto = novo_produto()
    produto_id = produto.id

    resp = client.delete(f"/produtos?id={produto_id}")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Produto excluído"}
    assert db.session.get(Produto, produto_id) is None


def test_excluir_produto_com_vendas(client, novo_produto):
    produto = novo_produto(quantidade=10)
    produto_id = produto.id
    resp = client.post("/vendas", json={
        "produto_id": produto_id,
        "produto_nome": "Widget",
        "quantidade": 1,
        "valor_unitario": 5,
    })
    assert resp.status_code == 201

    resp = client.delete(f"/produtos/{produto_id}")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Não é possível excluir produto com vendas registradas"
    assert db.session.get(Produto, produto_id) is not None


def test_excluir_produto_sem_id(client):
    resp = client.delete("/produtos")
    assert resp.status_code == 400


def test_excluir_produto_inexistente(client):
    resp = client.delete("/produtos/12345")
    assert resp.status_code == 404


def test_banco_barra_exclusao_de_produto_com_venda(app, novo_produto, venda_em, monkeypatch):
    # venda gravada entre a contagem e o DELETE: a FK segura a exclusão
    produto = novo_produto()
    produto_id = produto.id
    venda_em(produto, 1, "5.00", agora_local())

    service = ProdutoService(db.session)
    monkeypatch.setattr(service, "_total_vendas", lambda produto_id: 0)

    with pytest.raises(Conflict):
        service.excluir(produto_id)

    assert db.session.get(Produto, produto_id) is not None
    assert [v.produto_id for v in db.session.query(Venda).all()] == [produto_id]
