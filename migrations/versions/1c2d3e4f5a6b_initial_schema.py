"""initial schema: users, partnerships, revoked tokens

Revision ID: 1c2d3e4f5a6b
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c2d3e4f5a6b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='Admin'),
        sa.Column('campus_id', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('user_id'),
        sa.UniqueConstraint('email')
    )

    op.create_table(
        'partnerships',
        sa.Column('partnership_id', sa.String(length=36), nullable=False),
        sa.Column('partner_name', sa.String(length=255), nullable=False),
        sa.Column('organization_type', sa.String(length=100), nullable=False),
        sa.Column('partner_address', sa.String(length=255), nullable=True),
        sa.Column('partner_country', sa.String(length=100), nullable=True),
        sa.Column('aau_contact', sa.JSON(), nullable=True),
        sa.Column('partner_contact_person', sa.JSON(), nullable=True),
        sa.Column('partner_contact_person_secondary', sa.JSON(), nullable=True),
        sa.Column('aau_contact_person', sa.JSON(), nullable=True),
        sa.Column('aau_contact_person_secondary', sa.JSON(), nullable=True),
        sa.Column('potential_areas_of_collaboration', sa.JSON(), nullable=False),
        sa.Column('other_collaboration_area', sa.Text(), nullable=True),
        sa.Column('potential_start_date', sa.Date(), nullable=True),
        sa.Column('duration_of_partnership', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('mou_file_url', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Pending'),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('campus_id', sa.String(length=100), nullable=False),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.user_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('partnership_id')
    )
    op.create_index('ix_partnerships_campus_id', 'partnerships', ['campus_id'])
    op.create_index('ix_partnerships_status', 'partnerships', ['status'])
    op.create_index('ix_partnerships_organization_type', 'partnerships', ['organization_type'])
    op.create_index('ix_partnerships_potential_start_date', 'partnerships', ['potential_start_date'])

    op.create_table(
        'revoked_tokens',
        sa.Column('jti', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('revoked_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('jti')
    )


def downgrade():
    op.drop_table('revoked_tokens')
    op.drop_index('ix_partnerships_potential_start_date', table_name='partnerships')
    op.drop_index('ix_partnerships_organization_type', table_name='partnerships')
    op.drop_index('ix_partnerships_status', table_name='partnerships')
    op.drop_index('ix_partnerships_campus_id', table_name='partnerships')
    op.drop_table('partnerships')
    op.drop_table('users')
