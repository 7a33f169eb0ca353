"""
ratesweep: discounting swap valuation with adjoint curve sensitivities.
"""

__version__ = "0.1.0"
