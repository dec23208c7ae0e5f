"""
Step driver for hosts that render the simulation.
"""
