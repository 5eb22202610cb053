"""
martingale_cs.core
==================

Numerical foundations: directed rounding (`rounding`) and the literal
constants every bound depends on (`constants`).
"""
