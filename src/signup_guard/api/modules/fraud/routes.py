from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from signup_guard.api.common.schema import Pagination
from signup_guard.api.modules.fraud.exceptions import SignupBlockedError
from signup_guard.api.modules.fraud.gateway import RecordGateway, build_filters
from signup_guard.api.modules.fraud.models import FraudAlertRecord
from signup_guard.api.modules.fraud.schema import (
    FraudAlertPaginationParams,
    FraudAlertResponse,
    SessionLogRequest,
    SessionLogResponse,
)
from signup_guard.api.modules.fraud.service import SessionLoggerService
from signup_guard.api.modules.fraud.services.core import truncate_fingerprint
from signup_guard.api.modules.fraud.services.network import RequestIpResolver

router = APIRouter(route_class=DishkaRoute)


@router.post("/sessions", response_model=SessionLogResponse, status_code=200)
async def log_session(
    request: Request,
    payload: SessionLogRequest,
    session_logger: FromDishka[SessionLoggerService],
    ip_resolver: FromDishka[RequestIpResolver],
) -> SessionLogResponse:
    try:
        result = await session_logger.log_user_session(
            user_id=payload.user_id,
            email=payload.email,
            action=payload.action,
            environment=payload.environment,
            request_ip=ip_resolver.get_request_ip(request),
        )
    except SignupBlockedError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    return SessionLogResponse(
        logged=True,
        ip=result.snapshot.ip,
        fingerprint_id=truncate_fingerprint(result.snapshot.fingerprint),
        risk_level=result.alert.risk_level if result.alert else None,
    )


@router.get("/alerts", response_model=Pagination[FraudAlertResponse], status_code=200)
async def get_fraud_alerts(
    session: FromDishka[AsyncSession],
    params: FraudAlertPaginationParams = Query(),
) -> Pagination[FraudAlertResponse]:
    gateway = RecordGateway(session, FraudAlertRecord)
    filter_data = params.model_dump(
        exclude={"page", "page_size"},
        exclude_none=True,
    )
    filters = build_filters(FraudAlertRecord, filter_data)

    items = await gateway.get_all(
        limit=params.page_size,
        offset=params.offset,
        filters=filters,
    )
    total = await gateway.get_total_count(filters)

    return Pagination[FraudAlertResponse](
        items=[FraudAlertResponse.model_validate(item) for item in items],
        total=total,
        page=params.page,
        page_size=params.page_size,
    )
