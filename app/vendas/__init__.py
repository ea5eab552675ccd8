from flask import Blueprint

vendas_bp = Blueprint("vendas", __name__)

from . import routes  # noqa: E402, F401
