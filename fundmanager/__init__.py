"""Ballas Fund Manager: organization roster, stock, tasks, strikes, crafting and orders."""

__version__ = "1.0.0"
