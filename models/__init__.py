"""Database models."""

from db import Base

# Import all models so Alembic and create_all can detect them
from models.company import Company
from models.user import User
from models.contact import Contact
from models.project import Project
from models.task import Task, TaskAssignment
from models.timesheet import Timesheet
from models.sales_order import SalesOrder
from models.invoice import Invoice
from models.purchase_order import PurchaseOrder
from models.vendor_bill import VendorBill
from models.expense import Expense

__all__ = [
    "Base",
    "Company",
    "User",
    "Contact",
    "Project",
    "Task",
    "TaskAssignment",
    "Timesheet",
    "SalesOrder",
    "Invoice",
    "PurchaseOrder",
    "VendorBill",
    "Expense",
]
