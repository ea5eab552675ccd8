# ======================
# MODELO - PRODUTO
# ======================

from sqlalchemy import CheckConstraint, Index

from app.extensions import db
from app.utils.datetime import agora_local, formatar_iso
from app.utils.number_helpers import to_float


class Produto(db.Model):
    __tablename__ = "produtos"
    __table_args__ = (
        Index("idx_produto_nome", "nome"),
        Index("idx_produto_quantidade", "quantidade"),
        CheckConstraint("quantidade >= 0", name="ck_produto_quantidade_nao_negativa"),
    )

    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    descricao = db.Column(db.Text, nullable=True, default="")

    quantidade = db.Column(db.Integer, nullable=False, default=0)
    valor_venda = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    valor_aquisicao = db.Column(db.Numeric(10, 2), nullable=True, default=0)

    criado_em = db.Column(db.DateTime, default=agora_local, index=True)
    atualizado_em = db.Column(db.DateTime, default=agora_local, onupdate=agora_local, index=True)

    def __repr__(self):
        return f"<Produto {self.id} - {self.nome}>"

    def to_dict(self):
        return {
            "id": self.id,
            "nome": self.nome,
            "descricao": self.descricao,
            "quantidade": self.quantidade,
            "valor_venda": to_float(self.valor_venda),
            "valor_aquisicao": to_float(self.valor_aquisicao, None),
            "criado_em": formatar_iso(self.criado_em),
            "atualizado_em": formatar_iso(self.atualizado_em),
        }
