"""
S.G.C.I. - Permissions
Papéis de usuário e a única função de decisão de acesso do sistema
"""
from enum import Enum
from typing import Union


class UserRole(str, Enum):
    """Papéis de usuário"""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    CORRETOR = "CORRETOR"


class UserStatus(str, Enum):
    """Status de aprovação do usuário"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Action(str, Enum):
    """Ações protegidas"""
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_RECORDS = "view_records"
    MANAGE_RECORDS = "manage_records"
    MANAGE_NEGOTIATIONS = "manage_negotiations"
    ISSUE_RECEIPTS = "issue_receipts"
    APPROVE_BROKERS = "approve_brokers"
    REPLACE_STATE = "replace_state"
    SEED_DATA = "seed_data"
    MANAGE_USERS = "manage_users"


_STAFF_ACTIONS = frozenset({
    Action.VIEW_DASHBOARD,
    Action.VIEW_RECORDS,
    Action.MANAGE_RECORDS,
    Action.MANAGE_NEGOTIATIONS,
    Action.ISSUE_RECEIPTS,
    Action.APPROVE_BROKERS,
    Action.REPLACE_STATE,
    Action.SEED_DATA,
})

ROLE_PERMISSIONS = {
    UserRole.SUPER_ADMIN: frozenset(Action),
    UserRole.ADMIN: _STAFF_ACTIONS,
    UserRole.CORRETOR: frozenset({
        Action.VIEW_DASHBOARD,
        Action.VIEW_RECORDS,
        Action.MANAGE_NEGOTIATIONS,
        Action.ISSUE_RECEIPTS,
    }),
}


def is_allowed(
    role: Union[UserRole, str],
    status: Union[UserStatus, str],
    action: Action
) -> bool:
    """
    Decide se um usuário pode executar uma ação.

    Usuários não aprovados não executam nenhuma ação, independente do papel.
    Papéis desconhecidos são negados.
    """
    try:
        role = UserRole(role)
        status = UserStatus(status)
    except ValueError:
        return False

    if status != UserStatus.APPROVED:
        return False

    return action in ROLE_PERMISSIONS.get(role, frozenset())
