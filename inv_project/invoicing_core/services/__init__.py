"""
Invoicing services.

    tax          GST apportionment (pure)
    words        amount in words, Indian numbering (pure)
    sequence     per-company invoice number allocation
    assembly     validate + compute + allocate a new invoice
    invoicing    tenant-scoped create / read / list / update / delete
    clients      tenant-scoped client CRUD, soft delete
    items        tenant-scoped catalog item CRUD, soft delete
    onboarding   company + sequence provisioning
    companies    tenant detail updates (state change -> recompute task)

Import from the submodules; models import tax and words at load time.
"""
