# app/vendas/routes.py

from flask import current_app, jsonify, request

from app.extensions import db
from app.services.periodo import Periodo
from app.services.venda_service import VendaService
from app.utils.request_helpers import json_body, paginacao
from app.vendas import vendas_bp


def _service():
    return VendaService(
        db.session,
        itens_por_pagina=current_app.config["ITENS_POR_PAGINA"],
        max_itens_por_pagina=current_app.config["MAX_ITENS_POR_PAGINA"],
    )


@vendas_bp.route("", methods=["GET"])
def listar_vendas():
    page, limit = paginacao()
    periodo = Periodo.parse(request.args.get("periodo"))
    return jsonify(_service().listar(periodo=periodo, page=page, limit=limit))


@vendas_bp.route("", methods=["POST"])
def registrar_venda():
    venda = _service().criar_de_requisicao(json_body())
    return jsonify(venda.to_dict()), 201
