from django.contrib.contenttypes.models import ContentType
from django.core import serializers

from .models import Activity


def log_activity(user, action_type, instance, description=None):
    """Record an activity entry.

    By default a generic description is generated.  Callers may supply a
    custom ``description``, e.g. to mention the bill number of a sale.  For
    deletions a JSON copy of the object is kept in ``object_repr``.
    """
    if description is None:
        description = f"{instance.__class__.__name__} {instance} was {action_type}."
    object_repr = ''

    if action_type == 'deleted':
        object_repr = serializers.serialize('json', [instance])

    Activity.objects.create(
        user=user if user is not None and user.is_authenticated else None,
        action_type=action_type,
        description=description[:255],
        content_type=ContentType.objects.get_for_model(instance),
        object_id=instance.pk,
        object_repr=object_repr,
    )
