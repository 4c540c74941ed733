"""HTTP presentation layer for the tenancy bounded context."""
