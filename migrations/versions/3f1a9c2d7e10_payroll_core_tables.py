"""payroll core tables

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERIOD_TYPE = postgresql.ENUM('weekly', 'semi-monthly', 'monthly', name='period_type_enum', create_type=False)
PERIOD_STATUS = postgresql.ENUM('pending', 'completed', 'cancelled', name='period_status_enum', create_type=False)
HOLIDAY_TYPE = postgresql.ENUM('regular', 'special', name='holiday_type_enum', create_type=False)
STAT_TABLE_TYPE = postgresql.ENUM('SSS', 'PAGIBIG', 'PHILHEALTH', 'TAX', name='stat_table_type_enum', create_type=False)
ENUMS = (PERIOD_TYPE, PERIOD_STATUS, HOLIDAY_TYPE, STAT_TABLE_TYPE)

QUANTITY_FIGURES = (
    'absent_minutes', 'absent_days', 'late_minutes', 'undertime_minutes', 'overtime_minutes',
    'expected_hours_worked', 'hours_worked',
    'regular_holiday_hours', 'regular_holiday_hours_worked',
    'special_holiday_hours', 'special_holiday_hours_worked',
)
MONEY_FIGURES = (
    'basic_salary', 'absent_deductions', 'late_deductions', 'undertime_deductions', 'overtime_pay',
    'regular_holiday_hours_pay', 'special_holiday_hours_pay', 'leaves_pay',
    'total_allowances', 'total_commissions', 'total_other_compensations',
    'sss_contributions', 'pagibig_contributions', 'philhealth_contributions', 'total_contributions',
    'gross_income', 'taxable_income', 'withheld_tax', 'net_income',
)


def _figure_columns(with_ytd: bool):
    cols = []
    for name, precision in [(n, (12, 2)) for n in QUANTITY_FIGURES] + [(n, (14, 2)) for n in MONEY_FIGURES]:
        names = (name, name + '_ytd') if with_ytd else (name,)
        for nm in names:
            cols.append(sa.Column(nm, sa.Numeric(*precision), server_default='0', nullable=False))
    return cols


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum in ENUMS:
            enum.create(bind, checkfirst=True)

    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'company_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('period_cycle', PERIOD_TYPE, server_default='semi-monthly', nullable=False),
        sa.Column('grace_period_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('minimum_overtime_minutes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=True),
        sa.Column('employment_type', sa.String(length=20), server_default='fulltime', nullable=False),
        sa.Column('status', sa.String(length=16), server_default='active', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('company_id', 'code', name='uq_employee_company_code'),
    )
    op.create_index('ix_employees_company_id', 'employees', ['company_id'])

    op.create_table(
        'salary_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('basic_salary', sa.Numeric(14, 2), server_default='0', nullable=False),
        sa.Column('daily_rate', sa.Numeric(14, 4), nullable=True),
        sa.Column('hourly_rate', sa.Numeric(14, 4), server_default='0', nullable=False),
        sa.Column('working_hours_per_day', sa.Numeric(5, 2), server_default='8', nullable=False),
        sa.Column('working_days_per_week', sa.Numeric(4, 2), server_default='5', nullable=False),
        sa.Column('overtime_rate', sa.Numeric(6, 4), server_default='1', nullable=False),
        sa.Column('regular_holiday_rate', sa.Numeric(6, 4), server_default='1', nullable=False),
        sa.Column('special_holiday_rate', sa.Numeric(6, 4), server_default='0.3', nullable=False),
        sa.Column('allowances', sa.JSON(), nullable=False),
        sa.Column('commissions', sa.JSON(), nullable=False),
        sa.Column('other_compensations', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'time_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('expected_clock_in', sa.DateTime(), nullable=True),
        sa.Column('expected_clock_out', sa.DateTime(), nullable=True),
        sa.Column('clock_in', sa.DateTime(), nullable=True),
        sa.Column('clock_out', sa.DateTime(), nullable=True),
        sa.Column('attendance_status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_time_records_employee_id', 'time_records', ['employee_id'])
    op.create_index('ix_time_records_emp_date', 'time_records', ['employee_id', 'date'])

    op.create_table(
        'holidays',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('type', HOLIDAY_TYPE, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_holidays_company_id', 'holidays', ['company_id'])
    op.create_index('ix_holidays_date', 'holidays', ['date'])

    op.create_table(
        'periods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=True),
        sa.Column('company_period_number', sa.Integer(), server_default='1', nullable=False),
        sa.Column('type', PERIOD_TYPE, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', PERIOD_STATUS, server_default='pending', nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('company_id', 'company_period_number', name='uq_period_company_number'),
    )
    op.create_index('ix_periods_company_id', 'periods', ['company_id'])

    op.create_table(
        'stat_tables',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type', STAT_TABLE_TYPE, nullable=False),
        sa.Column('cycle', sa.String(length=20), nullable=True),
        sa.Column('value_json', sa.JSON(), nullable=False),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.Column('effective_to', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_stat_tables_resolve', 'stat_tables', ['type', 'cycle', 'effective_from', 'effective_to'])

    op.create_table(
        'employee_ytd',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, unique=True),
        *_figure_columns(with_ytd=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'payrolls',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('period_id', sa.Integer(), sa.ForeignKey('periods.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        *_figure_columns(with_ytd=True),
        sa.Column('leaves', sa.JSON(), nullable=False),
        sa.Column('allowances', sa.JSON(), nullable=False),
        sa.Column('commissions', sa.JSON(), nullable=False),
        sa.Column('other_compensations', sa.JSON(), nullable=False),
        sa.Column('calc_meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('period_id', 'employee_id', name='uq_payroll_period_employee'),
    )
    op.create_index('ix_payrolls_period_id', 'payrolls', ['period_id'])
    op.create_index('ix_payrolls_employee_id', 'payrolls', ['employee_id'])


def downgrade() -> None:
    for name in ('payrolls', 'employee_ytd', 'stat_tables', 'periods', 'holidays',
                 'time_records', 'salary_profiles', 'employees', 'company_settings', 'companies'):
        op.drop_table(name)

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum in ENUMS:
            enum.drop(bind, checkfirst=True)
