from flask import Flask
from sqlalchemy import inspect
from config import Config
from dotenv import load_dotenv
import os
import logging
from logging.handlers import RotatingFileHandler

# Importa extensões centralizadas
from app.extensions import db, migrate

load_dotenv()

# migrations/ fica na raiz do projeto, ao lado de config.py
MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "migrations")


# =========================================================
# LOGGING
# =========================================================
def configure_logging(app):
    """Configura logs em arquivo (rotativo) e no console."""
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, log_level_name, logging.INFO)

    # app.logger é o logger "app", compartilhado entre instâncias (testes)
    if getattr(app.logger, "_logging_configured", False):
        app.logger.setLevel(level)
        return

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    log_dir = app.config.get("LOG_DIR")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "estoque.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        app.logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    app.logger.setLevel(level)
    app.logger.addHandler(console_handler)
    app.logger.propagate = False

    app.logger._logging_configured = True
    app.logger.info("Logging configurado (nível=%s)", log_level_name)


# =========================================================
# APP FACTORY
# =========================================================
def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    # 🚨 Proteção: evita testes em banco de produção
    if app.config.get("TESTING") and "neon.tech" in (app.config.get("SQLALCHEMY_DATABASE_URI") or ""):
        raise RuntimeError("⚠️ Testes NÃO podem rodar em banco de produção (Neon)!")

    # Logging
    configure_logging(app)

    # Extensões
    db.init_app(app)
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)

    from app.utils.db_helpers import configurar_sqlite
    with app.app_context():
        configurar_sqlite(db.engine)

    # Erros → JSON
    from app.errors import register_error_handlers
    register_error_handlers(app)

    # =========================================================
    # REGISTRO DE BLUEPRINTS
    # =========================================================
    from app.main import main
    from app.produtos import produtos_bp
    from app.vendas import vendas_bp

    prefixo = (app.config.get("API_PREFIX") or "").rstrip("/")
    app.register_blueprint(main, url_prefix=prefixo or None)
    app.register_blueprint(produtos_bp, url_prefix=f"{prefixo}/produtos")
    app.register_blueprint(vendas_bp, url_prefix=f"{prefixo}/vendas")

    # =========================================================
    # CRIAÇÃO DAS TABELAS (ambientes sem migrations)
    # =========================================================
    if app.config.get("CRIAR_TABELAS") and not app.config.get("TESTING"):
        with app.app_context():
            tabelas = set(inspect(db.engine).get_table_names())
            if not {"produtos", "vendas"}.issubset(tabelas):
                db.create_all()
                app.logger.info("Tabelas 'produtos' e 'vendas' criadas")

    return app
