"""Role bindings consulted for privileged operations"""

from typing import List

from ..core.logging import get_logger
from ..models import Role, UserRole
from .database import get_db_session

logger = get_logger(__name__)


class RoleService:
    """Service class for role binding operations"""

    def has_role(self, identity_id: str, role: Role = Role.ADMIN) -> bool:
        """Check whether an identity holds a role"""
        if not identity_id:
            return False
        with get_db_session() as session:
            binding = (
                session.query(UserRole.id)
                .filter(UserRole.user_id == identity_id, UserRole.role == role)
                .first()
            )
            return binding is not None

    def is_admin(self, identity_id: str) -> bool:
        return self.has_role(identity_id, Role.ADMIN)

    def grant_role(self, identity_id: str, role: Role = Role.ADMIN) -> bool:
        """Bind a role to an identity

        Returns False if the identity already held the role.
        """
        with get_db_session() as session:
            existing = (
                session.query(UserRole)
                .filter(UserRole.user_id == identity_id, UserRole.role == role)
                .first()
            )
            if existing:
                return False

            session.add(UserRole(user_id=identity_id, role=role))

        logger.info(f"[ROLES] Granted {role.value} to {identity_id}")
        return True

    def revoke_role(self, identity_id: str, role: Role = Role.ADMIN) -> bool:
        """Remove a role binding; False if there was none"""
        with get_db_session() as session:
            deleted = (
                session.query(UserRole)
                .filter(UserRole.user_id == identity_id, UserRole.role == role)
                .delete(synchronize_session=False)
            )

        if deleted:
            logger.info(f"[ROLES] Revoked {role.value} from {identity_id}")
        return bool(deleted)

    def list_admins(self) -> List[str]:
        with get_db_session() as session:
            rows = (
                session.query(UserRole.user_id)
                .filter(UserRole.role == Role.ADMIN)
                .order_by(UserRole.created_at)
                .all()
            )
            return [row[0] for row in rows]


# Global service instance
role_service = RoleService()
