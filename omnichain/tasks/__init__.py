"""
Per-network administrative tasks. Each task takes a NetworkContext.
"""
