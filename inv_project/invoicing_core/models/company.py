from django.db import models


# ---------- Tenant / Company ----------
class Company(models.Model):

    """Tenant / Organization"""
    # Store company’s full display name
    name = models.CharField(max_length=200)

    slug = models.SlugField(  # A URL-friendly identifier
        max_length=80, unique=True  # no two companies can have the same slug
    )

    # GST registration number (15 chars, e.g. "27AADCB2230M1ZP")
    gstin = models.CharField(max_length=15, null=True, blank=True)
    address = models.TextField(null=True, blank=True)

    # Jurisdiction code used to decide intra- vs inter-state tax
    """ Compared by plain string equality with Client.state,
    so store canonical values ("Maharashtra", not "maharashtra ") """
    state = models.CharField(max_length=100, blank=True, default="")

    # Free-form per-tenant preferences (invoice template, bank details, ...)
    settings_json = models.JSONField(default=dict, blank=True)

    # Store timestamp when the record is first created
    created_at = models.DateTimeField(auto_now_add=True)

    # Meta options
    class Meta:
        verbose_name_plural = "companies"

    # String Representation
    def __str__(self):
        return self.name
