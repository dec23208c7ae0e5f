"""
Arena, entities, state discretization and the per-tick simulator.
"""
