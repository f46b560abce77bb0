"""访问凭据管理接口。"""

from fastapi import APIRouter, Depends, Path, Request, status

from ucr_api.core.errors import NotFoundError
from ucr_api.dependencies import get_credential_service
from ucr_api.schemas.common import ErrorResponse, SuccessResponse
from ucr_api.schemas.credential import CredentialWriteRequest
from ucr_api.schemas.responses import CredentialData, DeletedData
from ucr_api.services import CredentialService
from ucr_api.utils.response import list_success, success

router = APIRouter(prefix="/credentials", tags=["credentials"])


@router.post(
    "",
    summary="创建独立凭据",
    description="校验并创建一条未关联账号的凭据，可在后续更新账号时关联。",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessResponse[CredentialData],
    responses={422: {"model": ErrorResponse}},
)
def create_credential(
    payload: CredentialWriteRequest,
    request: Request,
    service: CredentialService = Depends(get_credential_service),
):
    """创建凭据。"""
    record = service.insert(payload.to_record())
    return success(request, CredentialData.from_record(record))


@router.get(
    "",
    summary="查询凭据列表",
    description="返回全部未删除凭据，按 ID 升序。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[list[CredentialData]],
)
def list_credentials(
    request: Request,
    service: CredentialService = Depends(get_credential_service),
):
    """查询凭据列表。"""
    return list_success(request, [CredentialData.from_record(record) for record in service.get_all()])


@router.get(
    "/{credential_id}",
    summary="查询凭据详情",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[CredentialData],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_credential(
    request: Request,
    credential_id: int = Path(..., description="凭据 ID。"),
    service: CredentialService = Depends(get_credential_service),
):
    """查询单个凭据。"""
    record = service.get_by_id(credential_id)
    if record is None:
        raise NotFoundError("credential", credential_id)
    return success(request, CredentialData.from_record(record))


@router.put(
    "/{credential_id}",
    summary="更新凭据",
    description="更新凭据全部可变字段，不影响逻辑删除标记。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[CredentialData],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def update_credential(
    payload: CredentialWriteRequest,
    request: Request,
    credential_id: int = Path(..., description="凭据 ID。"),
    service: CredentialService = Depends(get_credential_service),
):
    """更新凭据。"""
    record = service.update(payload.to_record(credential_id))
    return success(request, CredentialData.from_record(record))


@router.delete(
    "/{credential_id}",
    summary="删除凭据",
    description="逻辑删除凭据。仍被账号引用的凭据请使用账号下的解除并删除接口。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[DeletedData],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_credential(
    request: Request,
    credential_id: int = Path(..., description="凭据 ID。"),
    service: CredentialService = Depends(get_credential_service),
):
    """逻辑删除凭据。"""
    service.delete(credential_id)
    return success(request, {"id": credential_id, "deleted": True})
