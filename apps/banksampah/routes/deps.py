from typing import Optional

from fastapi import Depends, Header

from apps.banksampah.services.identity import bearer_token
from apps.banksampah.wiring import Services, get_services


async def current_operator(
    authorization: Optional[str] = Header(default=None),
    services: Services = Depends(get_services),
) -> Optional[str]:
    # a missing or invalid token falls back to the "System" stamp
    return await services.identity.current_operator(bearer_token(authorization))


async def require_operator(
    operator: Optional[str] = Depends(current_operator),
    services: Services = Depends(get_services),
) -> str:
    # member and catalog changes need a registered operator (admins row)
    return await services.operators.require(operator)
