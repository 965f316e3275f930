"""
Orbit Dynamics Model Package
============================

Force models, their Jacobians, and the equations of motion with the variational
equations for the state transition matrix.
"""
