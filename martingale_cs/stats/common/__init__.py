"""
martingale_cs.stats.common.__init__.py
======================================

Generic confidence-sequence bounds.

These functions are pure: each call recomputes its bound from scratch and
is safe to call from any thread.
"""
