# payroll_api/models/payroll/__init__.py
from payroll_api.extensions import db  # noqa

from .period import Period
from .stat_table import StatTable
from .ytd import EmployeeYTD
from .payroll import Payroll

__all__ = ["Period", "StatTable", "EmployeeYTD", "Payroll"]
