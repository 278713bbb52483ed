# qnnect/utils/transitions.py

# Queue entry status machine.
# waiting -> serving -> completed, and waiting/serving -> cancelled.
# completed and cancelled are terminal.

from __future__ import annotations
from typing import Dict, FrozenSet

from qnnect.errors import InvalidTransition
from qnnect.models import QueueStatus

ACTIVE: FrozenSet[QueueStatus] = frozenset({QueueStatus.waiting, QueueStatus.serving})

_ALLOWED: Dict[QueueStatus, FrozenSet[QueueStatus]] = {
    QueueStatus.waiting: frozenset({QueueStatus.serving, QueueStatus.cancelled}),
    QueueStatus.serving: frozenset({QueueStatus.completed, QueueStatus.cancelled}),
    QueueStatus.completed: frozenset(),
    QueueStatus.cancelled: frozenset(),
}

def can_transition(current: QueueStatus, target: QueueStatus) -> bool:
    return target in _ALLOWED[QueueStatus(current)]

def check_transition(current: QueueStatus, target: QueueStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(QueueStatus(current).value, QueueStatus(target).value)

def is_terminal(status: QueueStatus) -> bool:
    return not _ALLOWED[QueueStatus(status)]
