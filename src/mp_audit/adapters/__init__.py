"""Adapters – concrete sinks and host-framework integrations.

Each subpackage needs its optional extra installed, e.g.
``mp-audit[kafka]`` for :mod:`mp_audit.adapters.kafka`.  The core
packages never import an adapter.
"""
