"""Account approval — admin approvals and forum-head peer governance.

Accounts move ``pending -> approved | rejected``. Students are approved at
registration; teachers are decided by a college admin; forum heads are
decided either by a college admin or by a verified head of a forum the
candidate has applied to.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from campus_events.auth import Capability, Principal, requires
from campus_events.database import unit_of_work
from campus_events.errors import (
    DuplicateRequest,
    Forbidden,
    InvalidRequest,
    InvalidRole,
    InvalidTransition,
    NotFound,
)
from campus_events.models.college import College
from campus_events.models.event import Event
from campus_events.models.forum import Forum, ForumHead
from campus_events.models.user import ApprovalStatus, User, UserRole
from campus_events.timeutil import utcnow

logger = logging.getLogger(__name__)

SELF_REGISTRABLE_ROLES = frozenset({UserRole.student, UserRole.teacher, UserRole.forum_head})
ADMIN_APPROVABLE_ROLES = frozenset({UserRole.teacher, UserRole.forum_head})


def forum_memberships(db: Session, user_id: str, verified: Optional[bool] = None) -> frozenset[str]:
    """Forum ids the user heads; ``verified`` narrows to (un)verified rows."""
    query = db.query(ForumHead.forum_id).filter(ForumHead.user_id == user_id)
    if verified is not None:
        query = query.filter(ForumHead.is_verified == verified)
    return frozenset(row.forum_id for row in query.all())


def shared_forums(approver_forums: frozenset[str], target_forums: frozenset[str]) -> frozenset[str]:
    """Forums in which the approver may vote on the target."""
    return approver_forums & target_forums


def _load_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found.")
    return user


def _check_approver(approver: User, target: User) -> None:
    if approver.approval_status != ApprovalStatus.approved:
        raise Forbidden("Forbidden: Your own account is not yet approved.")
    if approver.college_id != target.college_id:
        raise Forbidden("Forbidden: Cannot act on users outside your college.")


def _check_pending(target: User, allowed_roles: frozenset[UserRole]) -> None:
    if target.role not in allowed_roles:
        raise InvalidRole(f"Users with role '{target.role.value}' do not go through approval here.")
    if target.approval_status != ApprovalStatus.pending:
        raise InvalidTransition(f"User is already {target.approval_status.value}.")


def _drop_unverified_memberships(db: Session, user_id: str) -> int:
    return (
        db.query(ForumHead)
        .filter(ForumHead.user_id == user_id, ForumHead.is_verified.is_(False))
        .delete(synchronize_session="fetch")
    )


def _verify_membership(db: Session, user_id: str, forum_id: str) -> None:
    membership = db.get(ForumHead, (user_id, forum_id))
    if membership:
        membership.is_verified = True
    else:
        db.add(ForumHead(user_id=user_id, forum_id=forum_id, is_verified=True))


def register_account(
    db: Session,
    college_id: str,
    full_name: str,
    email: str,
    role: UserRole,
    password_hash: str = "",
    forum_id: Optional[str] = None,
    verification_expires: Optional[datetime] = None,
) -> User:
    """Create an account in its initial approval state.

    Called by the sign-up layer once the password is hashed. Students start
    approved; teachers and forum heads start pending. A forum head applies to
    one forum and receives an unverified membership there.
    """
    try:
        role = UserRole(role)
    except ValueError:
        raise InvalidRole("Invalid role for registration.")
    if role not in SELF_REGISTRABLE_ROLES:
        raise InvalidRole("Invalid role for registration.")

    with unit_of_work(db):
        college = db.query(College).filter(College.college_id == college_id).first()
        if not college or not college.domain_name:
            raise NotFound("College not found.")
        domain = email.rsplit("@", 1)[-1].lower()
        if domain != college.domain_name.lower():
            raise InvalidRequest(
                f"Your email domain must match the selected college's domain ({college.domain_name})."
            )
        if db.query(User).filter(User.college_id == college_id, User.email == email).first():
            raise DuplicateRequest("A user with this email already exists.")

        if role == UserRole.forum_head:
            if not forum_id:
                raise InvalidRequest("A forum is required to register as a forum head.")
            forum = db.query(Forum).filter(Forum.forum_id == forum_id, Forum.college_id == college_id).first()
            if not forum:
                raise NotFound("Forum not found.")

        user = User(
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            college_id=college_id,
            approval_status=ApprovalStatus.approved if role == UserRole.student else ApprovalStatus.pending,
            is_email_verified=False,
            email_verification_expires=verification_expires,
        )
        db.add(user)
        db.flush()
        if role == UserRole.forum_head:
            db.add(ForumHead(user_id=user.user_id, forum_id=forum_id, is_verified=False))

    db.refresh(user)
    logger.info("Registered %s %s in college %s (%s)", role.value, user.user_id, college_id, user.approval_status.value)
    return user


@requires(Capability.approve_accounts)
def approve_account(db: Session, principal: Principal, user_id: str, forum_id: Optional[str] = None) -> User:
    """College-admin approval of a pending teacher or forum head.

    Approving a forum head verifies them for ``forum_id`` and discards any
    other pending candidacies.
    """
    with unit_of_work(db):
        approver = _load_user(db, principal.id)
        target = _load_user(db, user_id)
        _check_approver(approver, target)
        _check_pending(target, ADMIN_APPROVABLE_ROLES)

        if target.role == UserRole.forum_head:
            if not forum_id:
                raise InvalidRequest("A forumId is required to approve a forum head.")
            forum = (
                db.query(Forum)
                .filter(Forum.forum_id == forum_id, Forum.college_id == target.college_id)
                .first()
            )
            if not forum:
                raise NotFound("Forum not found.")
            _drop_unverified_memberships(db, user_id)
            db.flush()
            _verify_membership(db, user_id, forum_id)

        target.approval_status = ApprovalStatus.approved

    db.refresh(target)
    logger.info("Admin %s approved %s %s", principal.id, target.role.value, user_id)
    return target


@requires(Capability.approve_accounts)
def reject_account(db: Session, principal: Principal, user_id: str) -> User:
    with unit_of_work(db):
        approver = _load_user(db, principal.id)
        target = _load_user(db, user_id)
        _check_approver(approver, target)
        _check_pending(target, ADMIN_APPROVABLE_ROLES)

        target.approval_status = ApprovalStatus.rejected
        if target.role == UserRole.forum_head:
            _drop_unverified_memberships(db, user_id)

    db.refresh(target)
    logger.info("Admin %s rejected %s %s", principal.id, target.role.value, user_id)
    return target


def _peer_context(db: Session, principal: Principal, user_id: str) -> tuple[User, frozenset[str]]:
    """Validate a peer vote and return the target with the shared forums."""
    approver = _load_user(db, principal.id)
    target = _load_user(db, user_id)
    _check_approver(approver, target)
    _check_pending(target, frozenset({UserRole.forum_head}))

    common = shared_forums(
        forum_memberships(db, approver.user_id, verified=True),
        forum_memberships(db, target.user_id),
    )
    if not common:
        raise Forbidden("Forbidden: You can only act on heads for forums you are also a part of.")
    return target, common


@requires(Capability.peer_approve_forum_heads)
def approve_forum_head(db: Session, principal: Principal, user_id: str, forum_id: Optional[str] = None) -> User:
    """Peer approval by a verified head sharing a forum with the candidate."""
    with unit_of_work(db):
        target, common = _peer_context(db, principal, user_id)
        if forum_id is None:
            if len(common) > 1:
                raise InvalidRequest("Candidate applied to several of your forums; name the forum to approve.")
            (forum_id,) = common
        elif forum_id not in common:
            raise Forbidden("Forbidden: You can only approve heads for forums you are also a part of.")

        _verify_membership(db, user_id, forum_id)
        target.approval_status = ApprovalStatus.approved

    db.refresh(target)
    logger.info("Forum head %s approved head %s for forum %s", principal.id, user_id, forum_id)
    return target


@requires(Capability.peer_approve_forum_heads)
def reject_forum_head(db: Session, principal: Principal, user_id: str) -> User:
    with unit_of_work(db):
        target, _ = _peer_context(db, principal, user_id)
        target.approval_status = ApprovalStatus.rejected
        removed = _drop_unverified_memberships(db, user_id)

    db.refresh(target)
    logger.info("Forum head %s rejected head %s (%d pending memberships removed)", principal.id, user_id, removed)
    return target


@requires(Capability.peer_approve_forum_heads)
def get_pending_forum_heads(db: Session, principal: Principal) -> list[User]:
    """Pending candidates for any forum the caller is a verified head of."""
    my_forums = forum_memberships(db, principal.id, verified=True)
    if not my_forums:
        return []
    return (
        db.query(User)
        .join(ForumHead, ForumHead.user_id == User.user_id)
        .filter(
            User.college_id == principal.college_id,
            User.role == UserRole.forum_head,
            User.approval_status == ApprovalStatus.pending,
            ForumHead.is_verified.is_(False),
            ForumHead.forum_id.in_(my_forums),
        )
        .distinct()
        .order_by(User.created_at.asc())
        .all()
    )


@requires(Capability.approve_accounts)
def get_college_users(
    db: Session,
    principal: Principal,
    approval_status: Optional[ApprovalStatus] = None,
) -> list[User]:
    """Non-admin users of the admin's college, newest first, with forum memberships.

    Pass ``approval_status=ApprovalStatus.pending`` for the approval queue.
    """
    query = (
        db.query(User)
        .options(selectinload(User.forum_memberships).selectinload(ForumHead.forum))
        .filter(
            User.college_id == principal.college_id,
            User.user_id != principal.id,
            User.role != UserRole.college_admin,
        )
    )
    if approval_status is not None:
        query = query.filter(User.approval_status == approval_status)
    return query.order_by(User.created_at.desc()).all()


@requires(Capability.approve_accounts)
def delete_account(db: Session, principal: Principal, user_id: str) -> None:
    """Remove a user of the admin's college.

    Staff assignments (pending or approved) and forum memberships go with
    the account. Users who still organize events must hand them over first.
    """
    if principal.id == user_id:
        raise InvalidRequest("You cannot delete your own account.")

    with unit_of_work(db):
        target = _load_user(db, user_id)
        if target.college_id != principal.college_id:
            raise Forbidden("Forbidden: Cannot act on users outside your college.")
        if db.query(Event.event_id).filter(Event.organizer_id == user_id).first():
            raise InvalidRequest("User still organizes events; delete or reassign them first.")
        released = len(target.staff_assignments)
        db.delete(target)

    logger.info("Admin %s deleted user %s (%d staff assignments released)", principal.id, user_id, released)


def cleanup_unverified_accounts(db: Session, now: Optional[datetime] = None) -> int:
    """Delete accounts whose email verification window has lapsed.

    Runs as a periodic job; a failure is logged and rolled back so the next
    run can retry.
    """
    cutoff = now or utcnow()
    try:
        with unit_of_work(db):
            stale = (
                db.query(User)
                .filter(
                    User.is_email_verified.is_(False),
                    User.email_verification_expires.isnot(None),
                    User.email_verification_expires <= cutoff,
                )
                .all()
            )
            for user in stale:
                db.delete(user)
    except SQLAlchemyError:
        logger.exception("Error during unverified user cleanup")
        return 0

    if stale:
        logger.info("Removed %d unverified accounts", len(stale))
    return len(stale)
