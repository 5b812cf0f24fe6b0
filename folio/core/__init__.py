"""
Core infrastructure for Folio: paths, exceptions, results, logging,
error/log registries and CLI helpers.

Modules are imported directly (e.g. `from folio.core.exceptions import
ConfigError`) so that importing one does not pull in the others.
"""
