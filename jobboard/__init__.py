"""
Job Board

A demonstration server wiring a login-gated queue dashboard to Redis-backed
RQ queues, with HTTP endpoints to create queues, enqueue jobs and spin up
worker processes.
"""

__version__ = "1.0.0"
