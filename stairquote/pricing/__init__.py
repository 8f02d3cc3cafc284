"""
Stair pricing core.

Pure Decimal math over a read-only rule store. No I/O of its own, no
logging, no shared state. Given the same order and the same store snapshot
it always produces the same breakdown.
"""
