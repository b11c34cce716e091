"""Financial calculators: Price table amortization."""

from simulador.calculators.amortization import amortization_schedule, compute_amortization

__all__ = [
    "amortization_schedule",
    "compute_amortization",
]
