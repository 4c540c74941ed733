"""Farm records bounded context.

Livestock, health, breeding, milk, staff and stock records. Every record
lives in the owning tenant's database; nothing here is shared between tenants.
"""
