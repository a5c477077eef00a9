"""
Swap-math kernels.

These modules are designed to be:
- deterministic (integer-only, bit-identical across implementations),
- easy to audit (explicit intermediate variables),
- small surface-area (pure functions, typed results, no pool state).
"""
