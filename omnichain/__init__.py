"""
Omnichain Token Operations
==========================

Deployment, wiring, role administration and rate limit management for the token and
its OFT adapters.

Structure:
- consts: Mainnet topology and per-network configuration
- processing/: Rate limit resolution/reconciliation and pathway generation
- tasks/: Per-network administrative tasks
- deploy/: Contract deployment steps
"""

__version__ = "1.0.0"
