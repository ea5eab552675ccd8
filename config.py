import os
from dotenv import load_dotenv

# Carregar variáveis do .env
load_dotenv()


def _normalizar_database_url(url):
    """Neon/Heroku entregam 'postgres://', que o SQLAlchemy não aceita mais."""
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _engine_options(url):
    opcoes = {
        "pool_pre_ping": True,          # testa conexão antes de usar
        "pool_recycle": 1800,           # recicla conexões a cada 30 min
    }
    if url and url.startswith("postgresql"):
        opcoes["connect_args"] = {
            "sslmode": "require",       # Neon exige SSL
            "connect_timeout": 10,      # evita travas longas
        }
    return opcoes


def _env_bool(nome, default):
    valor = os.getenv(nome)
    if valor is None:
        return default
    return valor.strip().lower() in ("1", "true", "sim", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "estoque-vendas-secret")

    SQLALCHEMY_DATABASE_URI = _normalizar_database_url(
        os.getenv("DATABASE_URL", "sqlite:///estoque.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)

    # Timezone global
    TIMEZONE = os.getenv("TIMEZONE", "America/Fortaleza")

    # Logs
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")

    # Regras de negócio
    ESTOQUE_MINIMO = int(os.getenv("ESTOQUE_MINIMO", "20"))
    MARGEM_LUCRO_ESTIMADA = float(os.getenv("MARGEM_LUCRO_ESTIMADA", "0.4"))

    # Paginação
    ITENS_POR_PAGINA = int(os.getenv("ITENS_POR_PAGINA", "50"))
    MAX_ITENS_POR_PAGINA = int(os.getenv("MAX_ITENS_POR_PAGINA", "500"))

    # Rotas (ex.: "/api" em hospedagem serverless)
    API_PREFIX = os.getenv("API_PREFIX", "")

    # Em produção pode-se esconder a mensagem crua do banco nas respostas 500
    EXPOR_DETALHES_ERRO = _env_bool("EXPOR_DETALHES_ERRO", True)

    # Cria as tabelas no boot em vez de `flask db upgrade`
    CRIAR_TABELAS = _env_bool("CRIAR_TABELAS", False)
