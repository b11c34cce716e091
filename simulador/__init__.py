"""Simulador de financiamento imobiliário."""
