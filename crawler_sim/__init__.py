"""
Crawler simulation package.

This package contains the combat simulation and gear optimization engine for
the dungeon crawler, including the rule model, the Monte Carlo and exact
combat solvers, gear search, exploration risk estimation and the worker pool
used to parallelize evaluation.
"""
