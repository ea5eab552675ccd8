# =======================================================
# MÓDULO: app/errors.py
# Erros de domínio e conversão para respostas JSON
# =======================================================

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from app.extensions import db


class ApiError(Exception):
    """Erro com status HTTP e corpo `{error, detalhes?, ...}`."""

    status_code = 500
    mensagem = "Erro interno do servidor"

    def __init__(self, mensagem=None, detalhes=None, **extras):
        self.mensagem = mensagem or self.mensagem
        self.detalhes = detalhes
        self.extras = extras
        super().__init__(self.mensagem)

    def to_dict(self):
        corpo = {"error": self.mensagem}
        if self.detalhes:
            corpo["detalhes"] = self.detalhes
        corpo.update(self.extras)
        return corpo


class ValidationError(ApiError):
    status_code = 400
    mensagem = "Dados inválidos"


class NotFound(ApiError):
    status_code = 404
    mensagem = "Registro não encontrado"


class ProductNotFound(NotFound):
    mensagem = "Produto não encontrado"


class Conflict(ApiError):
    status_code = 400
    mensagem = "Operação não permitida"


class InsufficientStock(Conflict):
    mensagem = "Estoque insuficiente"

    def __init__(self, estoque_disponivel, mensagem=None):
        self.estoque_disponivel = estoque_disponivel
        super().__init__(mensagem, estoque_disponivel=estoque_disponivel)


class MethodNotAllowed(ApiError):
    status_code = 405
    mensagem = "Método não permitido"


class InternalError(ApiError):
    status_code = 500


def _resposta(corpo, status, headers=None):
    resp = jsonify(corpo)
    resp.status_code = status
    for chave, valor in (headers or {}).items():
        resp.headers[chave] = valor
    return resp


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        db.session.rollback()
        corpo = e.to_dict()
        if isinstance(e, InternalError) and not current_app.config.get("EXPOR_DETALHES_ERRO", True):
            corpo.pop("detalhes", None)
        return _resposta(corpo, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        if e.code == 404:
            erro = NotFound(f"Rota não encontrada: {request.path}")
            return _resposta(erro.to_dict(), erro.status_code)
        if e.code == 405:
            erro = MethodNotAllowed(f"Método {request.method} não permitido")
            permitidos = sorted(getattr(e, "valid_methods", None) or [])
            return _resposta(erro.to_dict(), erro.status_code, {"Allow": ", ".join(permitidos)})
        return _resposta({"error": e.description or e.name}, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        current_app.logger.exception(f"Erro não tratado em {request.method} {request.path}: {e}")
        corpo = {"error": "Erro interno do servidor"}
        if current_app.config.get("EXPOR_DETALHES_ERRO", True):
            corpo["detalhes"] = str(e)
        return _resposta(corpo, 500)
