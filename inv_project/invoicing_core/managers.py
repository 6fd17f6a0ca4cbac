from django.db import models

# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
# Define subclass of Django’s QuerySet
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):         # Add queryset helper
        return self.filter(company=company) # Apply filter

    def alive(self):
        return self.filter(deleted_at__isnull=True) # hide soft-deleted rows

    def active(self, company):
        # Enables query:
        # Invoice.objects.active(company)
        return self.for_company(company).alive()


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager):

    def get_queryset(self): # ensure every model gets TenantQuerySet(so .for_company() is always available)
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company): # can call for_company() directly on objects
        return self.get_queryset().for_company(company)

    def active(self, company):
        return self.get_queryset().active(company)


# Create an InvoiceLine, defaulting rate/tax_rate from Item if not given.
class InvoiceLineManager(TenantManager):
    def create_from_item(self, item, **kwargs):
        if kwargs.get("rate") is None:
            kwargs["rate"] = item.base_price
        if kwargs.get("tax_rate") is None:
            kwargs["tax_rate"] = item.tax_rate
        kwargs.setdefault("name", item.name)
        kwargs.setdefault("hsn_code", item.hsn_code)
        kwargs["item"] = item
        return super().create(**kwargs)
