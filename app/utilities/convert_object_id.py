from datetime import datetime
from bson import ObjectId
from app.exceptions import ValidationError


def convert_object_ids(obj):
    """Make a Mongo document JSON friendly: ObjectId to hex, datetime to ISO-8601."""
    if isinstance(obj, list):
        return [convert_object_ids(item) for item in obj]
    elif isinstance(obj, dict):
        return {key: convert_object_ids(value) for key, value in obj.items()}
    elif isinstance(obj, ObjectId):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    else:
        return obj


def objid(id, label: str = "id"):
    if isinstance(id, ObjectId):
        return id
    if not isinstance(id, str) or not ObjectId.is_valid(id):
        raise ValidationError(f"Invalid {label}", field=label)
    return ObjectId(id)
