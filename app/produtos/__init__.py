# ======================
# MÓDULO: PRODUTOS
# ======================

from flask import Blueprint

produtos_bp = Blueprint("produtos", __name__)

from app.produtos import routes  # noqa: E402, F401
