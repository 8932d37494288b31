"""Site health bounded context.

Periodically probes the website of every active tenant and records the
outcome. Each tenant is checked in isolation; one failing site never
aborts the batch.
"""
