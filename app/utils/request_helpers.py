from flask import current_app, request

from app.errors import ValidationError


def json_body():
    """Corpo JSON da requisição como dict; outro formato vira 400."""
    dados = request.get_json(silent=True)
    if dados is None:
        return {}
    if not isinstance(dados, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return dados


def paginacao():
    """Lê `page` e `limit` da query string (valores inválidos usam o padrão)."""
    page = request.args.get("page", 1, type=int) or 1
    limit = request.args.get("limit", current_app.config["ITENS_POR_PAGINA"], type=int)
    return max(page, 1), limit


def id_obrigatorio(produto_id=None):
    """Aceita o ID pela URL (/produtos/<id>) ou pela query string (?id=)."""
    if produto_id is None:
        produto_id = request.args.get("id", type=int)
    if produto_id is None:
        raise ValidationError("ID do produto é obrigatório")
    return produto_id
