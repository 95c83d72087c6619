"""Liveness and readiness probes for the webhook service.

Usage
-----
Import health resources for route registration::

    from gitpoap_bot.api.health.resources import HealthResource, ReadyResource
"""
