"""
Integer kernels for swap pricing and LP mint/burn.

Every function is pure, takes keyword-only ints and floors every division.
"""
