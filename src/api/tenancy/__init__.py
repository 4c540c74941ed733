"""Tenancy bounded context.

Routes every authenticated request to its tenant's isolated database. The
connection registry caches one ready handle per tenant database; the tenant
resolver maps a user to the database name used as the registry key.
"""
