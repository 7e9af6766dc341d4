"""This is the processing submodule.

This module contains the calculations behind the dashboard: the biological
clock model, the sunrise equation, sleep preferences, cycle and onboarding
helpers, drift descriptions and the location state.
"""
