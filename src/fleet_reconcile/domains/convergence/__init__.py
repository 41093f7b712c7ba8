"""Version convergence checks."""

from fleet_reconcile.domains.convergence.checker import ConvergenceChecker

__all__ = ["ConvergenceChecker"]
