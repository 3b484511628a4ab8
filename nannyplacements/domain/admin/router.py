"""Admin router - Back-office endpoints, admin role required throughout"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from ..academy.router import get_academy_service
from ..academy.schemas import AcademyVideoCreate, AcademyVideoResponse
from ..academy.service import AcademyService
from ..accounts.router import get_account_service, to_user_response
from ..accounts.schemas import RoleAssignment, UserResponse
from ..accounts.service import AccountService
from ..documents.router import get_document_service
from ..documents.service import DocumentService
from ..interests.router import get_interest_service
from ..interests.schemas import AdminCancel, AdminDecision, InterestRespond, InterestResponse
from ..interests.service import InterestService
from ..payments.router import get_payment_service
from ..payments.schemas import PaymentResponse, ReconcileResponse
from ..payments.service import PaymentService
from ..reviews.router import get_review_service
from ..reviews.schemas import ReviewResponse, ReviewStatusUpdate
from ..reviews.service import ReviewService
from .schemas import BadgeToggle, DashboardStats, DocumentStatusUpdate, NannyAdminResponse, ProfileApproval
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


# ============================================================================
# DASHBOARD
# ============================================================================


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    admin: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_stats()


# ============================================================================
# USERS
# ============================================================================


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    role: Optional[str] = Query(None, description="admin, nanny, client, no-role or all"),
    search: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service),
):
    return [to_user_response(u) for u in service.list_users(role, search)]


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def assign_role(
    user_id: str,
    data: RoleAssignment,
    admin: User = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service),
):
    """Replace the user's role and create the matching profile row if missing"""
    logger.info(f"👤 Admin {admin.email} assigning role {data.role} to user {user_id}")
    return to_user_response(service.assign_role(user_id, data.role))


# ============================================================================
# NANNIES
# ============================================================================


@router.get("/nannies/{nanny_id}", response_model=NannyAdminResponse)
async def get_nanny(
    nanny_id: str,
    admin: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_nanny_detail(nanny_id)


@router.put("/nannies/{nanny_id}/approval", response_model=NannyAdminResponse)
async def set_profile_approval(
    nanny_id: str,
    data: ProfileApproval,
    admin: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.set_profile_approval(nanny_id, data.approved)


@router.post("/nannies/{nanny_id}/badges", response_model=NannyAdminResponse)
async def toggle_badge(
    nanny_id: str,
    data: BadgeToggle,
    admin: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.toggle_badge(nanny_id, data.badge)


@router.put("/nannies/{nanny_id}/documents/{document_type}")
async def update_document_status(
    nanny_id: str,
    document_type: str,
    data: DocumentStatusUpdate,
    admin: User = Depends(get_current_admin),
    service: DocumentService = Depends(get_document_service),
):
    return await service.update_document_status(nanny_id, document_type, data.status)


# ============================================================================
# INTERESTS
# ============================================================================


@router.get("/interests", response_model=list[InterestResponse])
async def list_interests(
    stage: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    service: InterestService = Depends(get_interest_service),
):
    return [service.to_response(i, admin) for i in service.list_interests(admin, stage)]


@router.post("/interests/{interest_id}/respond", response_model=InterestResponse)
async def respond_on_behalf(
    interest_id: str,
    data: InterestRespond,
    admin: User = Depends(get_current_admin),
    service: InterestService = Depends(get_interest_service),
):
    """Approve or decline on the worker's behalf"""
    interest, notifications = await service.respond(admin, interest_id, data.response)
    return service.to_response(interest, admin, notifications)


@router.post("/interests/{interest_id}/decision", response_model=InterestResponse)
async def decide_interest(
    interest_id: str,
    data: AdminDecision,
    admin: User = Depends(get_current_admin),
    service: InterestService = Depends(get_interest_service),
):
    """Approve a paid interest (releases contact details) or reject the payment"""
    logger.info(f"⚖️ Admin {admin.email} decision {data.decision} on interest {interest_id}")
    interest, notifications = await service.admin_decide(interest_id, data.decision, data.admin_message)
    return service.to_response(interest, admin, notifications)


@router.post("/interests/{interest_id}/cancel", response_model=InterestResponse)
async def cancel_interest(
    interest_id: str,
    data: AdminCancel,
    admin: User = Depends(get_current_admin),
    service: InterestService = Depends(get_interest_service),
):
    interest, notifications = await service.cancel(interest_id, data.admin_message)
    return service.to_response(interest, admin, notifications)


# ============================================================================
# PAYMENTS
# ============================================================================


@router.get("/payments", response_model=list[PaymentResponse])
async def list_payments(
    admin: User = Depends(get_current_admin),
    service: PaymentService = Depends(get_payment_service),
):
    return service.list_payments(admin)


@router.post("/payments/reconcile", response_model=ReconcileResponse)
async def reconcile_payments(
    admin: User = Depends(get_current_admin),
    service: PaymentService = Depends(get_payment_service),
):
    """Advance interests that hold a completed payment but are still awaiting payment"""
    repaired = await service.reconcile()
    return ReconcileResponse(repaired_interest_ids=repaired, count=len(repaired))


# ============================================================================
# ACADEMY
# ============================================================================


@router.get("/academy/videos", response_model=list[AcademyVideoResponse])
async def list_academy_videos(
    admin: User = Depends(get_current_admin),
    service: AcademyService = Depends(get_academy_service),
):
    """All videos, including inactive ones"""
    return service.list_all_videos()


@router.post("/academy/videos", response_model=AcademyVideoResponse, status_code=201)
async def create_academy_video(
    data: AcademyVideoCreate,
    admin: User = Depends(get_current_admin),
    service: AcademyService = Depends(get_academy_service),
):
    return service.create_video(data)


@router.post("/academy/videos/{video_id}/toggle", response_model=AcademyVideoResponse)
async def toggle_academy_video(
    video_id: str,
    admin: User = Depends(get_current_admin),
    service: AcademyService = Depends(get_academy_service),
):
    return service.toggle_video(video_id)


@router.delete("/academy/videos/{video_id}", status_code=204)
async def delete_academy_video(
    video_id: str,
    admin: User = Depends(get_current_admin),
    service: AcademyService = Depends(get_academy_service),
):
    service.delete_video(video_id)


# ============================================================================
# REVIEWS
# ============================================================================


@router.get("/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    type: Optional[str] = Query(None, description="review or complaint"),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    service: ReviewService = Depends(get_review_service),
):
    """Reviews and complaints; archived ones only appear when filtered by status"""
    return [service.to_response(r) for r in service.list_reviews(type, status, search)]


@router.put("/reviews/{review_id}/status", response_model=ReviewResponse)
async def update_review_status(
    review_id: str,
    data: ReviewStatusUpdate,
    admin: User = Depends(get_current_admin),
    service: ReviewService = Depends(get_review_service),
):
    review, notifications = await service.update_review_status(review_id, data.status, data.admin_response)
    return service.to_response(review, notifications)


@router.post("/reviews/{review_id}/archive", response_model=ReviewResponse)
async def archive_review(
    review_id: str,
    admin: User = Depends(get_current_admin),
    service: ReviewService = Depends(get_review_service),
):
    return service.to_response(service.archive(review_id))
