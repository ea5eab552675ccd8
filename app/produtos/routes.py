# ============================================================
# MÓDULO: PRODUTOS - API JSON
# Arquivo: app/produtos/routes.py
# ============================================================

from flask import current_app, jsonify, request

from app.extensions import db
from app.produtos import produtos_bp
from app.services.produto_service import ProdutoService
from app.utils.request_helpers import id_obrigatorio, json_body, paginacao


def _service():
    return ProdutoService(
        db.session,
        itens_por_pagina=current_app.config["ITENS_POR_PAGINA"],
        max_itens_por_pagina=current_app.config["MAX_ITENS_POR_PAGINA"],
    )


@produtos_bp.route("", methods=["GET"])
def listar_produtos():
    page, limit = paginacao()
    termo = request.args.get("search", "").strip()
    return jsonify(_service().listar(termo=termo, page=page, limit=limit))


@produtos_bp.route("", methods=["POST"])
def criar_produto():
    produto = _service().criar(json_body())
    return jsonify(produto.to_dict()), 201


@produtos_bp.route("/<int:produto_id>", methods=["GET"])
def obter_produto(produto_id):
    return jsonify(_service().obter(produto_id).to_dict())


@produtos_bp.route("", methods=["PUT"])
@produtos_bp.route("/<int:produto_id>", methods=["PUT"])
def atualizar_produto(produto_id=None):
    produto_id = id_obrigatorio(produto_id)
    produto = _service().atualizar(produto_id, json_body())
    return jsonify(produto.to_dict())


@produtos_bp.route("", methods=["DELETE"])
@produtos_bp.route("/<int:produto_id>", methods=["DELETE"])
def excluir_produto(produto_id=None):
    produto_id = id_obrigatorio(produto_id)
    _service().excluir(produto_id)
    return jsonify({"success": True, "message": "Produto excluído"})
