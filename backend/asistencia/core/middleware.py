from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from asistencia.core.security import decode_token
from asistencia.schemas.attendance import Employee
from asistencia.services.data_access import AttendanceDataSource, get_data_source

bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_ROLES = ("admin", "hr", "manager", "super_admin")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    source: AttendanceDataSource = Depends(get_data_source),
) -> Employee:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise unauthorized

    email = payload.get("email")
    if not payload.get("sub") or not email:
        raise unauthorized

    employee = await source.find_employee_by_email(email)
    if employee is None:
        raise unauthorized

    if not employee.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Employee account is disabled",
        )

    return employee


def require_role(*roles: str) -> Callable:
    async def role_checker(current_user: Employee = Depends(get_current_user)) -> Employee:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(roles)}",
            )
        return current_user

    return role_checker
