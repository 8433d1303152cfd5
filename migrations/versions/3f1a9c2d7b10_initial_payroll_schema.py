"""initial payroll schema: companies, users, departments, employees,
salaries, deductions, employee_inactivity

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

budget_period_enum = sa.Enum('MONTHLY', 'YEARLY', name='budget_period_enum')
deduction_kind_enum = sa.Enum('TAX', 'INSURANCE', 'CUSTOM', name='deduction_kind_enum')
inactivity_type_enum = sa.Enum(
    'ADMINISTRATIVE', 'PAID_LEAVE', 'UNPAID_LEAVE', 'SICK_LEAVE', 'SUSPENSION', 'OTHER',
    name='inactivity_type_enum',
)


def upgrade() -> None:
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20)),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_company_id', 'users', ['company_id'])

    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('budget', sa.Numeric(12, 2), nullable=False),
        sa.Column('budget_period', budget_period_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'name', name='uq_department_company_name'),
    )

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('inactive_from', sa.Date(), nullable=True),
        sa.Column('inactive_to', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'email', name='uq_employee_company_email'),
    )
    op.create_index('ix_emp_company_id', 'employees', ['company_id'])
    op.create_index('ix_emp_dept_id', 'employees', ['department_id'])

    op.create_table(
        'salaries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('gross_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('insurance_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('other_deductions_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('net_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('salary_month', sa.Integer(), nullable=False),
        sa.Column('salary_year', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_salaries_employee_id', 'salaries', ['employee_id'], unique=True)

    op.create_table(
        'deductions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('salary_id', sa.Integer(), sa.ForeignKey('salaries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('kind', deduction_kind_enum, nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('value', sa.Numeric(12, 4), nullable=False),
        sa.Column('is_percentage', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_deductions_salary_id', 'deductions', ['salary_id'])

    op.create_table(
        'employee_inactivity',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('reason', sa.String(length=1000)),
        sa.Column('type', inactivity_type_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime()),
        sa.CheckConstraint('end_date IS NULL OR start_date <= end_date', name='ck_inactivity_range'),
    )
    op.create_index('ix_employee_inactivity_employee_id', 'employee_inactivity', ['employee_id'])


def downgrade() -> None:
    op.drop_index('ix_employee_inactivity_employee_id', table_name='employee_inactivity')
    op.drop_table('employee_inactivity')
    op.drop_index('ix_deductions_salary_id', table_name='deductions')
    op.drop_table('deductions')
    op.drop_index('ix_salaries_employee_id', table_name='salaries')
    op.drop_table('salaries')
    op.drop_index('ix_emp_dept_id', table_name='employees')
    op.drop_index('ix_emp_company_id', table_name='employees')
    op.drop_table('employees')
    op.drop_table('departments')
    op.drop_index('ix_users_company_id', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_table('companies')
    inactivity_type_enum.drop(op.get_bind(), checkfirst=True)
    deduction_kind_enum.drop(op.get_bind(), checkfirst=True)
    budget_period_enum.drop(op.get_bind(), checkfirst=True)
