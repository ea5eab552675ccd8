from flask import Blueprint

# Blueprint das rotas gerais (health e dashboard)
main = Blueprint("main", __name__)

# Importa as rotas (necessário para registrar no blueprint)
from app.main import routes  # noqa: E402, F401
