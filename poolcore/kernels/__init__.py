"""
Kernel layer.

`poolcore/kernels/python/` holds the integer arithmetic that every validator
must reproduce bit-for-bit. The `poolcore.core` engines wrap these kernels with
action-level rules (slippage, deadlines, minimum reserve) and typed errors.
"""
