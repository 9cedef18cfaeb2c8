"""Budgetly: personal budgeting backend."""

__version__ = "0.1.0"
