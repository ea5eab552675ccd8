# =======================================================
# MÓDULO: app/vendas/models.py
# Uma venda = um produto, gravada junto com a baixa de estoque
# =======================================================

from sqlalchemy import CheckConstraint

from app.extensions import db
from app.utils.datetime import agora_local, formatar_iso
from app.utils.number_helpers import to_float

FORMA_PAGAMENTO_PADRAO = "dinheiro"


class Venda(db.Model):
    __tablename__ = "vendas"
    __table_args__ = (
        CheckConstraint("quantidade > 0", name="ck_venda_quantidade_positiva"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # Rastreabilidade; o banco recusa excluir produto com vendas (RESTRICT)
    produto_id = db.Column(
        db.Integer,
        db.ForeignKey("produtos.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    # Snapshot do nome no momento da venda
    produto_nome = db.Column(db.String(255), nullable=False)

    quantidade = db.Column(db.Integer, nullable=False)
    valor_unitario = db.Column(db.Numeric(10, 2), nullable=False)
    valor_total = db.Column(db.Numeric(10, 2), nullable=False)
    forma_pagamento = db.Column(db.String(50), nullable=False, default=FORMA_PAGAMENTO_PADRAO)

    data_venda = db.Column(db.DateTime, nullable=False, default=agora_local, index=True)

    produto = db.relationship("Produto", lazy="joined")

    def __repr__(self):
        return f"<Venda {self.id} - {self.produto_nome}>"

    def to_dict(self):
        return {
            "id": self.id,
            "produto_id": self.produto_id,
            "produto_nome": self.produto_nome,
            "produto_nome_completo": self.produto.nome if self.produto else None,
            "quantidade": self.quantidade,
            "valor_unitario": to_float(self.valor_unitario),
            "valor_total": to_float(self.valor_total),
            "forma_pagamento": self.forma_pagamento,
            "data_venda": formatar_iso(self.data_venda),
        }
