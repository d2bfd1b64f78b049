"""Serialization of movement instance logs to the ``log_data`` column.

The column holds one JSON document. The variant is not stored with it: on
read, the referenced movement's type selects which log class to decode into.
"""

import json

from ..errors import LogDecodeError
from ..models.movement import MovementType
from ..models.movement_instance import LOG_FIELDS, MovementInstance

_FIELDS_BY_TYPE = {movement_type: (name, log_cls) for name, movement_type, log_cls in LOG_FIELDS}


def encode_log(instance: MovementInstance) -> tuple[str | None, bool]:
    """Serialize the instance's log.

    Fields are checked in priority order strength, cardio, amrap, emom and
    the first populated one wins.

    Returns:
        ``(blob, True)`` for a populated log, ``(None, False)`` when the
        instance has no recorded metrics yet.
    """
    for name, _, _ in LOG_FIELDS:
        log = getattr(instance, name)
        if log is not None:
            return json.dumps(log.to_dict()), True
    return None, False


def decode_log(
    instance: MovementInstance,
    blob: str | None,
    movement_type: MovementType | str | None,
) -> None:
    """Populate the log field selected by ``movement_type`` from ``blob``.

    An absent or empty blob leaves the instance untouched, as does a
    movement type this version does not know about.

    Raises:
        LogDecodeError: the blob is not a valid log for the movement type.
    """
    if not blob:
        return

    known_type = MovementType.parse(movement_type)
    if known_type is None:
        return

    name, log_cls = _FIELDS_BY_TYPE[known_type]
    try:
        log = log_cls.from_dict(json.loads(blob))
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise LogDecodeError(
            f"Failed to decode {known_type.value} log for movement instance {instance.id}: {e}"
        ) from e
    setattr(instance, name, log)
