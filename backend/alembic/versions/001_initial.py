"""Initial identity and permission schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def audit_columns():
    return [
        sa.Column('uuid', sa.String(36), nullable=False, unique=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def address_columns():
    return [
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
    ]


def upgrade() -> None:
    # Companies table
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('company_name', sa.String(255), nullable=False),
        *address_columns(),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
    )
    
    # Branches table
    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('branch_name', sa.String(255), nullable=False),
        *address_columns(),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
    )
    op.create_index('ix_branches_company_id', 'branches', ['company_id'])
    
    # Employees table
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('employee_code', sa.String(50), nullable=True),
        sa.Column('employee_name', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('designation', sa.String(100), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('date_of_joining', sa.Date(), nullable=True),
        sa.Column('is_doctor', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
    )
    op.create_index('ix_employees_company_id', 'employees', ['company_id'])
    op.create_index('ix_employees_email', 'employees', ['email'])
    
    # Roles and permission catalog
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('role_name', sa.String(100), nullable=False, unique=True),
        sa.Column('role_description', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
    )
    op.create_table(
        'menus',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('menu_name', sa.String(100), nullable=False),
        sa.Column('component', sa.String(255), nullable=True),
        sa.Column('route', sa.String(255), nullable=True),
        sa.Column('parent_menu_id', sa.Integer(), sa.ForeignKey('menus.id'), nullable=True),
        sa.Column('menu_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('hide', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('hidetab', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
    )
    op.create_table(
        'features',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('menu_id', sa.Integer(), sa.ForeignKey('menus.id'), nullable=True),
        sa.Column('feature_name', sa.String(100), nullable=False),
        sa.Column('feature_code', sa.String(100), nullable=False, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
    )
    op.create_table(
        'role_menus',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('menu_id', sa.Integer(), sa.ForeignKey('menus.id'), nullable=False),
        sa.Column('can_view', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('can_create', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('can_edit', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('can_delete', sa.Boolean(), nullable=False, server_default=sa.false()),
        *audit_columns(),
        sa.UniqueConstraint('role_id', 'menu_id', name='uq_role_menu'),
    )
    op.create_table(
        'role_features',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('feature_id', sa.Integer(), sa.ForeignKey('features.id'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
        sa.UniqueConstraint('role_id', 'feature_id', name='uq_role_feature'),
    )
    
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False, unique=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('status', sa.Enum('active', 'inactive', 'suspended', name='userstatus'), nullable=False, server_default='active'),
        sa.Column('expiry_minutes', sa.Integer(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked_until', sa.DateTime(), nullable=True),
        *audit_columns(),
    )
    
    # Employee links
    op.create_table(
        'employee_branches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *audit_columns(),
        sa.UniqueConstraint('employee_id', 'branch_id', name='uq_employee_branch'),
    )
    op.create_table(
        'employee_files',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_path', sa.String(1024), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
    )


def downgrade() -> None:
    op.drop_table('employee_files')
    op.drop_table('employee_branches')
    op.drop_table('users')
    op.execute('DROP TYPE IF EXISTS userstatus')
    op.drop_table('role_features')
    op.drop_table('role_menus')
    op.drop_table('features')
    op.drop_table('menus')
    op.drop_table('roles')
    op.drop_index('ix_employees_email', table_name='employees')
    op.drop_index('ix_employees_company_id', table_name='employees')
    op.drop_table('employees')
    op.drop_index('ix_branches_company_id', table_name='branches')
    op.drop_table('branches')
    op.drop_table('companies')
