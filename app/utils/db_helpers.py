# app/utils/db_helpers.py
from sqlalchemy import event

from app.errors import NotFound


def get_or_404(session, model, id, erro=NotFound):
    """
    Busca um objeto pelo ID usando session.get.
    Se não encontrar, levanta o erro de domínio informado (404).
    """
    obj = session.get(model, id) if id is not None else None
    if obj is None:
        raise erro()
    return obj


def configurar_sqlite(engine):
    """
    Ajusta um engine SQLite em arquivo para se comportar como o Postgres
    nas vendas: cada transação abre com BEGIN IMMEDIATE (trava de escrita
    adquirida logo no início) e as chaves estrangeiras ficam ativas.
    Em ":memory:" existe uma única conexão, então só as FKs são ligadas.
    """
    if engine.dialect.name != "sqlite":
        return

    em_memoria = engine.url.database in (None, "", ":memory:")

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        if not em_memoria:
            # desliga o BEGIN automático do pysqlite; o evento "begin" assume
            dbapi_connection.isolation_level = None

    if not em_memoria:
        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
