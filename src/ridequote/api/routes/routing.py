from fastapi import APIRouter, HTTPException

from ridequote.api.dependencies import ResolverDep
from ridequote.api.models import RouteRequest
from ridequote.geo.models import RoutePlan

router = APIRouter()


@router.post("", response_model=RoutePlan)
async def resolve_route(body: RouteRequest, resolver: ResolverDep) -> RoutePlan:
    plan = await resolver.resolve(body.origin, body.destination, body.options)
    if plan is None:
        raise HTTPException(status_code=404, detail="No routing provider returned a usable route")
    return plan
