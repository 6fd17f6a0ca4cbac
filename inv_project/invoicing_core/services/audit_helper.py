import json

from django.core.serializers.json import DjangoJSONEncoder

from ..models import AuditLog, Company


def _jsonable(changes):
    # Decimal -> "236.00", date -> "2025-04-01", so money keeps its scale
    if changes is None:
        return None
    return json.loads(json.dumps(changes, cls=DjangoJSONEncoder))


def log_action(*, action: str, instance, user=None, company: Company | None = None, changes=None):
    """
    Record one business event (create / update / delete / provision /
    recompute) against `instance`.

    The tenant defaults to `instance.company`, or to the instance itself
    when it is a Company. `changes` may hold Decimal and date values.
    """
    if company is None:
        company = instance if isinstance(instance, Company) else getattr(instance, "company", None)

    return AuditLog.objects.create(
        company=company,
        user=user,
        action=action,
        object_type=instance._meta.object_name,
        object_id=str(instance.pk),
        changes=_jsonable(changes),
    )
