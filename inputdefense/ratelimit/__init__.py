"""Rate limiting — fixed-window counters keyed by action name.

Counters live in the same storage the client controls, so the limit is
advisory: a hostile client can clear or forge its own windows.
"""
