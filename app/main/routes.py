from flask import current_app, jsonify, request
from sqlalchemy import text

from app.extensions import db
from app.main import main
from app.services.dashboard_service import DashboardService
from app.services.periodo import Periodo
from app.utils.datetime import now_local

TABELAS = ["produtos", "vendas"]


# --- Health Check ---
@main.route("/", methods=["GET", "HEAD"])
@main.route("/health", methods=["GET", "HEAD"])
def health():
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Health check falhou: {e}")
        return jsonify({"status": "error", "msg": str(e)}), 500

    return jsonify({
        "status": "ok",
        "banco": db.engine.dialect.name,
        "tabelas": TABELAS,
        "data": now_local().isoformat(),
    })


# ============================================================
# Dashboard
# ============================================================
@main.route("/dashboard", methods=["GET"])
def dashboard():
    periodo = Periodo.parse(request.args.get("periodo"), padrao=Periodo.HOJE)
    service = DashboardService(
        db.session,
        estoque_minimo=current_app.config["ESTOQUE_MINIMO"],
        margem_lucro=current_app.config["MARGEM_LUCRO_ESTIMADA"],
    )
    return jsonify(service.montar_dashboard(periodo))
