"""Access decision logic on top of the permission cache."""
from clinic_access import schemas
from clinic_access.core.enums import Capability, Module, Role
from clinic_access.core.logging_config import logger
from clinic_access.services.permission_cache import PermissionCache


def authorize_request(request: schemas.AccessRequest, permissions: PermissionCache) -> schemas.AccessResponse:
    """Evaluates an access request and explains the decision."""
    logger.info(
        f"Access request: role={request.role}, module={request.module}, capability={request.capability}"
    )

    # Names outside the closed sets are denied with a specific reason.
    if Role.parse(request.role) is None:
        reason = f"Implicit Deny: unknown role '{request.role}'."
    elif Module.parse(request.module) is None:
        reason = f"Implicit Deny: unknown module '{request.module}'."
    elif Capability.parse(request.capability) is None:
        reason = f"Implicit Deny: unknown capability '{request.capability}'."
    elif permissions.get_permission(request.role, request.module) is None:
        reason = "Implicit Deny: no permission entry for this role and module."
    else:
        decision = permissions.has_permission(request.role, request.module, request.capability)
        verb = "grants" if decision else "denies"
        reason = f"Stored permission {verb} '{request.capability.strip().lower()}'."
        logger.info(f"Access decision: {decision} - {reason}")
        return schemas.AccessResponse(decision=decision, reason=reason)

    logger.info(f"Access decision: False - {reason}")
    return schemas.AccessResponse(decision=False, reason=reason)
