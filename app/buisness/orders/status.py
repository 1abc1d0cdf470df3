"""
Order status lifecycle

pendente -> aguardando -> resolvido is the usual path, but any status may be
set from any other one. Only membership in the status set is enforced.
"""

from typing import Dict, Set
from app.buisness.errors import ValidationError


class OrderStatus:
    """
    Status values and the (unrestricted) transition table for Order.status.
    """

    PENDENTE = 'pendente'  # Initial state
    AGUARDANDO = 'aguardando'
    RESOLVIDO = 'resolvido'

    INITIAL = PENDENTE
    STATUSES = (PENDENTE, AGUARDANDO, RESOLVIDO)

    LABELS = {
        PENDENTE: 'Pendente',
        AGUARDANDO: 'Aguardando',
        RESOLVIDO: 'Resolvido',
    }

    # Every status may move to every other one
    TRANSITIONS: Dict[str, Set[str]] = dict.fromkeys(STATUSES, frozenset(STATUSES))

    @classmethod
    def is_valid(cls, status) -> bool:
        return status in cls.STATUSES

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        if not cls.is_valid(to_status):
            return False
        if from_status == to_status:
            return True
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """
        Raises:
            ValidationError: to_status is not one of STATUSES
        """
        if not cls.can_transition(from_status, to_status):
            raise ValidationError(
                'status',
                f"Invalid status '{to_status}'. Expected one of: {', '.join(cls.STATUSES)}"
            )


DEPARTMENTS = (
    'Administrativo',
    'Comercial',
    'Financeiro',
    'Marketing',
    'Operações',
    'Recursos Humanos',
    'TI',
    'Outro',
)
