"""create_portal_tables

Revision ID: 5b1e7c0d9a21
Revises:
Create Date: 2026-03-02 09:14:37.281604

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e7c0d9a21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. Local accounts
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_users_username')
    )

    # 2. Document control register
    op.create_table(
        'docon_documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contract_code', sa.String(length=10), nullable=False),
        sa.Column('document_type', sa.String(length=10), nullable=False),
        sa.Column('discipline', sa.String(length=10), nullable=False),
        sa.Column('location', sa.String(length=10), nullable=False),
        sa.Column('work_system', sa.String(length=10), nullable=False),
        sa.Column('serial_number', sa.String(length=10), nullable=False),
        sa.Column('revision_number', sa.String(length=10), nullable=False),
        sa.Column('document_number', sa.String(length=100), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('pic', sa.String(length=255), nullable=False),
        sa.Column('date_received', sa.Date(), nullable=False),
        sa.Column('transmittal_no', sa.String(length=100), nullable=True),
        sa.Column('submission_status', sa.String(length=30), nullable=False),
        sa.Column('document_workflow_status', sa.String(length=10), nullable=True),
        sa.Column('revision_review_code', sa.String(length=5), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('previous_revision_id', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['previous_revision_id'], ['docon_documents.id'],
            name='fk_docon_documents_previous_revision', ondelete='SET NULL'
        ),
        sa.UniqueConstraint(
            'contract_code', 'document_type', 'discipline', 'location',
            'work_system', 'serial_number', 'revision_number',
            name='uq_docon_documents_number_parts'
        )
    )
    op.create_index('ix_docon_documents_document_number', 'docon_documents', ['document_number'], unique=True)
    op.create_index(
        'ix_docon_documents_combination',
        'docon_documents',
        ['contract_code', 'document_type', 'discipline', 'location', 'work_system'],
    )

    op.create_table(
        'docon_revision_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('revision_number', sa.String(length=10), nullable=False),
        sa.Column('revision_date', sa.Date(), nullable=False),
        sa.Column('revised_by', sa.String(length=255), nullable=True),
        sa.Column('review_code', sa.String(length=5), nullable=True),
        sa.Column('review_comments', sa.Text(), nullable=True),
        sa.Column('reviewer_name', sa.String(length=255), nullable=True),
        sa.Column('review_date', sa.Date(), nullable=True),
        sa.Column('changes_description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['document_id'], ['docon_documents.id'],
            name='fk_docon_revision_history_document', ondelete='CASCADE'
        )
    )
    op.create_index('ix_docon_revision_history_document_id', 'docon_revision_history', ['document_id'])

    op.create_table(
        'docon_document_files',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('file_key', sa.String(length=255), nullable=False),
        sa.Column('file_name', sa.String(length=500), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('file_type', sa.String(length=255), nullable=True),
        sa.Column('file_url', sa.String(length=1000), nullable=True),
        sa.Column('file_category', sa.String(length=20), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('uploaded_by', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['document_id'], ['docon_documents.id'],
            name='fk_docon_document_files_document', ondelete='CASCADE'
        )
    )
    op.create_index('ix_docon_document_files_document_id', 'docon_document_files', ['document_id'])

    # 3. Asset registers
    op.create_table(
        'it_assets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('nama', sa.String(length=255), nullable=False),
        sa.Column('pic', sa.String(length=255), nullable=False),
        sa.Column('serial_number', sa.String(length=255), nullable=False),
        sa.Column('tanggal_diterima', sa.Date(), nullable=False),
        sa.Column('kategori', sa.String(length=100), nullable=False),
        sa.Column('nomor_asset', sa.String(length=255), nullable=False),
        sa.Column('nomor_bast', sa.String(length=255), nullable=True),
        sa.Column('keterangan', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nomor_asset', name='uq_it_assets_nomor_asset')
    )
    op.create_index('ix_it_assets_pic', 'it_assets', ['pic'])
    op.create_index('ix_it_assets_serial_number', 'it_assets', ['serial_number'])
    op.create_index('ix_it_assets_kategori', 'it_assets', ['kategori'])
    op.create_index('ix_it_assets_nomor_asset', 'it_assets', ['nomor_asset'])

    op.create_table(
        'laptops',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('assigned_user', sa.String(length=255), nullable=True),
        sa.Column('serial_number', sa.String(length=255), nullable=False),
        sa.Column('asset_number', sa.String(length=255), nullable=True),
        sa.Column('model_type', sa.String(length=255), nullable=True),
        sa.Column('no_bast', sa.String(length=255), nullable=True),
        sa.Column('date_received', sa.Date(), nullable=False),
        sa.Column('condition', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'radio',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nama_radio', sa.String(length=255), nullable=False),
        sa.Column('tipe_radio', sa.String(length=255), nullable=True),
        sa.Column('serial_number', sa.String(length=255), nullable=False),
        sa.Column('user_radio', sa.String(length=255), nullable=True),
        sa.Column('nomor_bast', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # 4. Network: vouchers and Starlink usage
    op.create_table(
        'voucher',
        sa.Column('kode_voucher', sa.String(length=100), nullable=False),
        sa.Column('nama_user', sa.String(length=255), nullable=False),
        sa.Column('tipe_voucher', sa.String(length=100), nullable=False),
        sa.Column('divisi', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='aktif'),
        sa.Column('tanggal_kadaluarsa', sa.Date(), nullable=True),
        sa.Column('dibuat_pada', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('kode_voucher')
    )

    op.create_table(
        'starlink_usage',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tanggal', sa.Date(), nullable=False),
        sa.Column('unit_starlink', sa.String(length=255), nullable=False),
        sa.Column('total_pemakaian', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tanggal', 'unit_starlink', name='uq_starlink_usage_date_unit')
    )
    op.create_index('ix_starlink_usage_tanggal', 'starlink_usage', ['tanggal'])
    op.create_index('ix_starlink_usage_unit_starlink', 'starlink_usage', ['unit_starlink'])

    # 5. File sharing
    op.create_table(
        'files',
        sa.Column('file_key', sa.String(length=36), nullable=False),
        sa.Column('nama_file', sa.String(length=500), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=True),
        sa.Column('content_type', sa.String(length=255), nullable=True),
        sa.Column('size', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('file_key')
    )

    op.create_table(
        'file_shares',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('file_key', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['file_key'], ['files.file_key'],
            name='fk_file_shares_file', ondelete='CASCADE'
        )
    )
    op.create_index('ix_file_shares_file_key', 'file_shares', ['file_key'])


def downgrade() -> None:
    op.drop_index('ix_file_shares_file_key', table_name='file_shares')
    op.drop_table('file_shares')
    op.drop_table('files')

    op.drop_index('ix_starlink_usage_unit_starlink', table_name='starlink_usage')
    op.drop_index('ix_starlink_usage_tanggal', table_name='starlink_usage')
    op.drop_table('starlink_usage')
    op.drop_table('voucher')

    op.drop_table('radio')
    op.drop_table('laptops')
    op.drop_index('ix_it_assets_nomor_asset', table_name='it_assets')
    op.drop_index('ix_it_assets_kategori', table_name='it_assets')
    op.drop_index('ix_it_assets_serial_number', table_name='it_assets')
    op.drop_index('ix_it_assets_pic', table_name='it_assets')
    op.drop_table('it_assets')

    op.drop_index('ix_docon_document_files_document_id', table_name='docon_document_files')
    op.drop_table('docon_document_files')
    op.drop_index('ix_docon_revision_history_document_id', table_name='docon_revision_history')
    op.drop_table('docon_revision_history')
    op.drop_index('ix_docon_documents_combination', table_name='docon_documents')
    op.drop_index('ix_docon_documents_document_number', table_name='docon_documents')
    op.drop_table('docon_documents')

    op.drop_table('users')
