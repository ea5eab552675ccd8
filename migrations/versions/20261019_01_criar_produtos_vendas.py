"""Cria tabelas produtos e vendas

Revision ID: 20261019_01_criar_produtos_vendas
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01_criar_produtos_vendas"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "produtos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(length=255), nullable=False),
        sa.Column("descricao", sa.Text(), nullable=True),
        sa.Column("quantidade", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("valor_venda", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("valor_aquisicao", sa.Numeric(10, 2), nullable=True, server_default="0"),
        sa.Column("criado_em", sa.DateTime(), nullable=True, server_default=sa.func.current_timestamp()),
        sa.Column("atualizado_em", sa.DateTime(), nullable=True, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("quantidade >= 0", name="ck_produto_quantidade_nao_negativa"),
    )
    op.create_index("idx_produto_nome", "produtos", ["nome"])
    op.create_index("idx_produto_quantidade", "produtos", ["quantidade"])
    op.create_index("ix_produtos_criado_em", "produtos", ["criado_em"])
    op.create_index("ix_produtos_atualizado_em", "produtos", ["atualizado_em"])

    op.create_table(
        "vendas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "produto_id",
            sa.Integer(),
            sa.ForeignKey("produtos.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("produto_nome", sa.String(length=255), nullable=False),
        sa.Column("quantidade", sa.Integer(), nullable=False),
        sa.Column("valor_unitario", sa.Numeric(10, 2), nullable=False),
        sa.Column("valor_total", sa.Numeric(10, 2), nullable=False),
        sa.Column("forma_pagamento", sa.String(length=50), nullable=False, server_default="dinheiro"),
        sa.Column("data_venda", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("quantidade > 0", name="ck_venda_quantidade_positiva"),
    )
    # Índices usados pelo dashboard (filtros por período e ranking)
    op.create_index("ix_vendas_produto_id", "vendas", ["produto_id"])
    op.create_index("ix_vendas_data_venda", "vendas", ["data_venda"])


def downgrade():
    op.drop_index("ix_vendas_data_venda", table_name="vendas")
    op.drop_index("ix_vendas_produto_id", table_name="vendas")
    op.drop_table("vendas")

    op.drop_index("ix_produtos_atualizado_em", table_name="produtos")
    op.drop_index("ix_produtos_criado_em", table_name="produtos")
    op.drop_index("idx_produto_quantidade", table_name="produtos")
    op.drop_index("idx_produto_nome", table_name="produtos")
    op.drop_table("produtos")
