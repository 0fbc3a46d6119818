"""
Example models. Each module builds a model with `build()` and can be run
as a program, e.g. `python -m opmodel.examples.golomb`.
"""
