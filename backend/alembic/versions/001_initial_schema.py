"""Initial license manager schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-17

Twelve tables, BIGINT surrogate keys, RESTRICT foreign keys, lookup rows seeded.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')

# Constraint names follow NAMING_CONVENTION in app/core/database.py so that
# autogenerate sees the same names create_all would produce.


def _id(column='id'):
    return sa.Column(column, BIGINT, autoincrement=True, nullable=False)


def _pk(table, column='id'):
    return sa.PrimaryKeyConstraint(column, name=f'pk_{table}')


def _uq(table, column):
    return sa.UniqueConstraint(column, name=f'uq_{table}_{column}')


def _fk(table, column, target, nullable=False, index=True):
    return sa.Column(
        column,
        BIGINT,
        sa.ForeignKey(f'{target}.id', name=f'fk_{table}_{column}_{target}', ondelete='RESTRICT'),
        nullable=nullable,
        index=index,
    )


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _lookup(table, description_nullable=True):
    return op.create_table(
        table,
        _id(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column(
            'description',
            sa.String(255),
            nullable=description_nullable,
            server_default=None if description_nullable else '',
        ),
        *_timestamps(),
        _pk(table),
        _uq(table, 'name'),
    )


def upgrade() -> None:
    # === LOOKUPS ===
    type_lookup = _lookup('license_type_lookup')
    status_lookup = _lookup('license_status_lookup', description_nullable=False)
    action_lookup = _lookup('license_action_lookup')

    # === CUSTOMERS ===
    op.create_table(
        'customers',
        _id(),
        sa.Column('business_name', sa.String(255), nullable=False, index=True),
        sa.Column('contact_name', sa.String(255), nullable=False),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('business_address1', sa.String(255), nullable=True),
        sa.Column('business_address2', sa.String(255), nullable=True),
        sa.Column('business_address_city', sa.String(100), nullable=True),
        sa.Column('business_address_state', sa.String(100), nullable=True),
        sa.Column('business_address_zip', sa.String(20), nullable=True),
        sa.Column('business_address_country', sa.String(100), nullable=True),
        *_timestamps(),
        _pk('customers'),
    )

    # === ACCOUNTS ===
    op.create_table(
        'users',
        _id(),
        _fk('users', 'customer_id', 'customers'),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('login', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_encrypted', sa.LargeBinary(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        _pk('users'),
        _uq('users', 'login'),
        _uq('users', 'email'),
    )
    op.create_table(
        'administrators',
        _id(),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('login', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_encrypted', sa.LargeBinary(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        _pk('administrators'),
        _uq('administrators', 'login'),
        _uq('administrators', 'email'),
    )

    # === SERVERS ===
    op.create_table(
        'servers',
        _id(),
        _fk('servers', 'customer_id', 'customers', nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('fingerprint', sa.LargeBinary(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        _pk('servers'),
        _uq('servers', 'name'),
        _uq('servers', 'fingerprint'),
    )

    # === LICENSES ===
    op.create_table(
        'licenses',
        _id(),
        sa.Column('unique_id', sa.Uuid(), nullable=False),
        sa.Column('external_name', sa.String(255), nullable=True),
        _fk('licenses', 'license_status_id', 'license_status_lookup'),
        _fk('licenses', 'type_id', 'license_type_lookup'),
        _fk('licenses', 'server_id', 'servers', nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('activation_date', sa.DateTime(), nullable=True),
        sa.Column('expiration_date', sa.DateTime(), nullable=True),
        sa.Column('updated_by', sa.String(100), nullable=True),
        *_timestamps(),
        _pk('licenses'),
        _uq('licenses', 'unique_id'),
    )

    # === PURCHASE ORDERS ===
    op.create_table(
        'purchase_orders',
        _id(),
        sa.Column('po_name', sa.String(255), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        _fk('purchase_orders', 'customer_id', 'customers'),
        sa.Column('is_closed', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        _pk('purchase_orders'),
    )
    op.create_table(
        'po_license_join',
        _id(),
        _fk('po_license_join', 'po_id', 'purchase_orders'),
        _fk('po_license_join', 'license_id', 'licenses'),
        sa.Column('duration', sa.SmallInteger(), nullable=False),
        *_timestamps(),
        _pk('po_license_join'),
    )

    # === HISTORY ===
    op.create_table(
        'license_ledger',
        _id(),
        _fk('license_ledger', 'license_id', 'licenses'),
        _fk('license_ledger', 'server_id', 'servers', nullable=True),
        sa.Column('activity_date', sa.DateTime(), nullable=False),
        _fk('license_ledger', 'license_action_id', 'license_action_lookup', index=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        *_timestamps(),
        _pk('license_ledger'),
    )
    op.create_table(
        'license_audit',
        _id('audit_id'),
        _fk('license_audit', 'license_id', 'licenses'),
        sa.Column('unique_id', sa.Uuid(), nullable=True),
        sa.Column('external_name', sa.String(255), nullable=True),
        _fk('license_audit', 'license_status_id', 'license_status_lookup', index=False),
        _fk('license_audit', 'type_id', 'license_type_lookup', index=False),
        _fk('license_audit', 'server_id', 'servers', nullable=True, index=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('updated_by', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
        _pk('license_audit', 'audit_id'),
    )

    # === SEED LOOKUPS (status order fixes Available = 1) ===
    op.bulk_insert(type_lookup, [
        {'name': 'Annual', 'description': 'Renews every year'},
        {'name': 'Perpetual', 'description': 'Never expires'},
        {'name': 'Subscription', 'description': 'Term set by the purchase order'},
        {'name': 'Trial', 'description': 'Evaluation license'},
    ])
    op.bulk_insert(status_lookup, [
        {'name': 'Available', 'description': 'Not assigned to a server'},
        {'name': 'Activation Requested', 'description': 'Server nominated, awaiting activation'},
        {'name': 'Activated', 'description': 'Active on a server'},
        {'name': 'Deactivated', 'description': 'Legacy state; deactivation returns licenses to Available'},
    ])
    op.bulk_insert(action_lookup, [
        {'name': 'Activate', 'description': 'License activated'},
        {'name': 'Deactivate', 'description': 'License deactivated'},
        {'name': 'Request Activation', 'description': 'Activation requested'},
        {'name': 'Renew', 'description': 'License renewed'},
    ])


def downgrade() -> None:
    op.drop_table('license_audit')
    op.drop_table('license_ledger')
    op.drop_table('po_license_join')
    op.drop_table('purchase_orders')
    op.drop_table('licenses')
    op.drop_table('servers')
    op.drop_table('administrators')
    op.drop_table('users')
    op.drop_table('customers')
    op.drop_table('license_action_lookup')
    op.drop_table('license_status_lookup')
    op.drop_table('license_type_lookup')
