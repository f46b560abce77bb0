"""用户账号管理接口。"""

from fastapi import APIRouter, Depends, Path, Query, Request, status

from ucr_api.core.errors import NotFoundError
from ucr_api.dependencies import get_account_service
from ucr_api.schemas.account import AccountWriteRequest
from ucr_api.schemas.common import ErrorResponse, SuccessResponse
from ucr_api.schemas.credential import AccountCredentialUpdateRequest
from ucr_api.schemas.responses import AccountData, CredentialData, CredentialDetachData, DeletedData
from ucr_api.services import AccountService
from ucr_api.utils.response import list_success, success

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post(
    "",
    summary="创建账号",
    description="校验账号字段与唯一性；携带凭据时先持久化凭据再写入账号。",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessResponse[AccountData],
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def create_account(
    payload: AccountWriteRequest,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    """创建账号。"""
    record = service.insert(payload.to_record())
    return success(request, AccountData.from_record(record))


@router.get(
    "",
    summary="查询账号列表",
    description="返回全部未删除账号及其关联凭据，按 ID 升序。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[list[AccountData]],
)
def list_accounts(
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    """查询账号列表。"""
    return list_success(request, [AccountData.from_record(record) for record in service.get_all()])


@router.get(
    "/search/by-username",
    summary="按用户名查找账号",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AccountData],
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def find_account_by_username(
    request: Request,
    username: str = Query(..., description="精确匹配的用户名。"),
    service: AccountService = Depends(get_account_service),
):
    """按用户名精确查找。"""
    record = service.find_by_username(username)
    if record is None:
        raise NotFoundError("account", username.strip())
    return success(request, AccountData.from_record(record))


@router.get(
    "/search/by-email",
    summary="按邮箱查找账号",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AccountData],
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def find_account_by_email(
    request: Request,
    email: str = Query(..., description="精确匹配的邮箱。"),
    service: AccountService = Depends(get_account_service),
):
    """按邮箱精确查找。"""
    record = service.find_by_email(email)
    if record is None:
        raise NotFoundError("account", email.strip())
    return success(request, AccountData.from_record(record))


@router.get(
    "/{account_id}",
    summary="查询账号详情",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AccountData],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_account(
    request: Request,
    account_id: int = Path(..., description="账号 ID。"),
    service: AccountService = Depends(get_account_service),
):
    """查询单个账号。"""
    record = service.get_by_id(account_id)
    if record is None:
        raise NotFoundError("account", account_id)
    return success(request, AccountData.from_record(record))


@router.put(
    "/{account_id}",
    summary="更新账号",
    description=(
        "更新账号字段，唯一性校验排除自身。"
        "请求体不含 credential 时账号将解除凭据关联，但不会删除该凭据。"
    ),
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[AccountData],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def update_account(
    payload: AccountWriteRequest,
    request: Request,
    account_id: int = Path(..., description="账号 ID。"),
    service: AccountService = Depends(get_account_service),
):
    """更新账号。"""
    record = service.update(payload.to_record(account_id))
    return success(request, AccountData.from_record(record))


@router.delete(
    "/{account_id}",
    summary="删除账号",
    description="逻辑删除账号，关联凭据保留。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[DeletedData],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_account(
    request: Request,
    account_id: int = Path(..., description="账号 ID。"),
    service: AccountService = Depends(get_account_service),
):
    """逻辑删除账号。"""
    service.delete(account_id)
    return success(request, {"id": account_id, "deleted": True})


@router.put(
    "/{account_id}/credential",
    summary="更新账号凭据",
    description="仅允许更新账号当前持有的凭据。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[CredentialData],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def update_account_credential(
    payload: AccountCredentialUpdateRequest,
    request: Request,
    account_id: int = Path(..., description="账号 ID。"),
    service: AccountService = Depends(get_account_service),
):
    """更新账号当前凭据。"""
    record = service.update_account_credential(account_id, payload.to_record(payload.credential_id))
    return success(request, CredentialData.from_record(record))


@router.delete(
    "/{account_id}/credential/{credential_id}",
    summary="解除并删除账号凭据",
    description="先将账号凭据引用置空并落库，再逻辑删除凭据。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[CredentialDetachData],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def detach_and_delete_credential(
    request: Request,
    account_id: int = Path(..., description="账号 ID。"),
    credential_id: int = Path(..., description="账号当前持有的凭据 ID。"),
    service: AccountService = Depends(get_account_service),
):
    """解除账号与凭据关联并删除凭据。"""
    service.detach_and_delete_credential(account_id, credential_id)
    return success(
        request,
        {"account_id": account_id, "credential_id": credential_id, "detached": True, "deleted": True},
    )
