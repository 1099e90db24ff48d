"""
Solver clients for AlloyShare.
"""

from alloyshare.core.solver.base import SolverClient
from alloyshare.core.solver.http_client import HttpSolverClient

__all__ = [
    "SolverClient",
    "HttpSolverClient",
]
