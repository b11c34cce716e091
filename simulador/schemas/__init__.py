"""Pydantic schemas: financing record, calculator results, proposals."""
