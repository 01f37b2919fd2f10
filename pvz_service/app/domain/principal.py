"""
Authenticated caller identity passed explicitly into domain services.
"""

from dataclasses import dataclass

from pvz_service.app.core.exceptions import ForbiddenError
from pvz_service.app.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """Subject id and role taken from a verified token."""
    subject_id: str
    role: UserRole

    def require(self, role: UserRole, action: str) -> None:
        """
        Raise ForbiddenError unless the principal has the given role.

        Args:
            role: Role the operation is restricted to
            action: Human-readable description used in the error message
        """
        if self.role != role:
            raise ForbiddenError(
                f"Access denied: only {role.value} users can {action}",
                details={"required_role": role.value, "role": self.role.value}
            )
