#!/usr/bin/env python3
"""
Lifecycle Service - drives a study request and its match through their states.

Every public operation runs inside exactly one unit of work obtained from the
injected factory: commit on success, rollback on any error, session always
released. Status writes are conditional updates guarded by the expected prior
status (see core.lifecycle.states), so a concurrent change surfaces as
ConflictError instead of being overwritten.
"""

import contextlib
import logging
from typing import Callable, ContextManager, Dict, Iterator, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database.models import StudyRequest, StudyMatch, MatchStatus, RequestStatus
from database.repository import TulenRepository
from database.uow import tulen_uow
from core.scorer import CandidateProfile, RequesterProfile, RankedCandidate, rank_candidates
from core.lifecycle.exceptions import (
    TulenError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    ValidationError,
    StorageError,
)
from core.lifecycle.states import (
    LifecycleEvent,
    Transition,
    TRANSITIONS,
    plan_transition,
    DELETABLE_REQUEST_STATUSES,
)
from core.lifecycle.models import (
    NewStudyRequest,
    ProfileUpdate,
    StudyRequestRecord,
    StudyMatchRecord,
    RatingRecord,
    CompletionResult,
    LeaveBubbleResult,
    validate_rating,
)
from notification import NotificationService, NotificationType

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], ContextManager[TulenRepository]]


class LifecycleService:
    """Request/match lifecycle manager."""

    def __init__(self, uow_factory: UnitOfWorkFactory = tulen_uow):
        self._uow_factory = uow_factory

    @contextlib.contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[TulenRepository]:
        """
        Run one operation in one transaction and translate store failures.

        IntegrityError (e.g. a second open match for a request) is a lost race
        and becomes ConflictError; any other SQLAlchemyError becomes StorageError.
        """
        try:
            with self._uow_factory() as repo:
                yield repo
        except TulenError as e:
            logger.warning(f"{operation} rejected: {e}")
            raise
        except IntegrityError as e:
            logger.warning(f"{operation} hit a constraint violation: {e.orig}")
            raise ConflictError(f"{operation} conflicts with a concurrent change") from e
        except SQLAlchemyError as e:
            logger.exception(f"Storage failure during {operation}")
            raise StorageError(f"Storage failure during {operation}") from e

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def create_request(self, requester_id: int, new_request: NewStudyRequest) -> StudyRequestRecord:
        """
        Post a new open study request in the requester's current bubble.

        Raises:
            ValidationError: Missing text fields, or a skill from another bubble
            NotFoundError: Unknown user, bubble or skill
            UnauthorizedError: Requester is not a member of the bubble
        """
        new_request = new_request.validated()

        with self._unit_of_work("create_request") as repo:
            requester = self._get_user(repo, requester_id)

            if repo.users.get_bubble(new_request.bubble_id) is None:
                raise NotFoundError(f"Bubble {new_request.bubble_id} not found")

            skill = repo.users.get_skill(new_request.skill_id)
            if skill is None:
                raise NotFoundError(f"Skill {new_request.skill_id} not found")
            if skill.bubble_id is not None and skill.bubble_id != new_request.bubble_id:
                raise ValidationError(
                    f"Skill {skill.skill_id} does not belong to bubble {new_request.bubble_id}",
                    {'skill_id': 'Skill is not offered in this bubble'}
                )

            if requester.current_bubble_id != new_request.bubble_id:
                raise UnauthorizedError(f"User {requester_id} is not a member of bubble {new_request.bubble_id}")

            request = repo.requests.create(
                requester_id=requester_id,
                bubble_id=new_request.bubble_id,
                skill_id=new_request.skill_id,
                specific_topic=new_request.specific_topic,
                learning_objectives=new_request.learning_objectives,
                preferred_schedule=new_request.preferred_schedule,
            )
            record = StudyRequestRecord.from_model(request)

        logger.info(f"User {requester_id} created study request {record.request_id} in bubble {record.bubble_id}")
        return record

    def compute_ranked_candidates(self, request_id: int, viewer_id: Optional[int] = None) -> List[RankedCandidate]:
        """
        Rank eligible teachers for a request, best first.

        Eligible: a teaching endorsement for the request's skill, not the
        requester, and currently inside a bubble.

        Args:
            request_id: Study request to find teachers for
            viewer_id: Caller; when given it must be the requester
        """
        with self._unit_of_work("compute_ranked_candidates") as repo:
            request = self._get_request(repo, request_id)
            if viewer_id is not None and viewer_id != request.requester_id:
                raise UnauthorizedError(f"User {viewer_id} does not own study request {request_id}")

            requester = self._get_user(repo, request.requester_id)
            pending_teachers = repo.matches.pending_teacher_ids(request_id)

            candidates = [
                CandidateProfile(
                    user_id=user.user_id,
                    username=user.username,
                    proficiency_level=endorsement.proficiency_level,
                    department=user.department,
                    study_year=user.study_year,
                    has_request_pending=user.user_id in pending_teachers,
                )
                for user, endorsement in repo.users.find_teaching_candidates(
                    request.skill_id, exclude_user_id=request.requester_id
                )
            ]

            ranked = rank_candidates(
                candidates,
                RequesterProfile(department=requester.department, study_year=requester.study_year)
            )

        logger.info(f"Ranked {len(ranked)} candidate(s) for study request {request_id}")
        return ranked

    def delete_or_cancel_request(self, request_id: int, requester_id: int) -> None:
        """
        Hard-delete a request together with its matches and ratings.

        Requests with a live match (pending or active) are refused; cancel the
        match first with cancel_pending or cancel_active.
        """
        with self._unit_of_work("delete_request") as repo:
            request = self._get_request(repo, request_id)
            self._require_owner(request, requester_id)

            status = RequestStatus(request.status)
            if status not in DELETABLE_REQUEST_STATUSES:
                raise ConflictError(f"Study request {request_id} is {status.value}; cancel it before deleting")
            if repo.matches.get_open_for_request(request_id) is not None:
                raise ConflictError(f"Study request {request_id} still has an open match")

            repo.ratings.delete_for_request(request_id)
            repo.matches.delete_for_request(request_id)
            if not repo.requests.delete(request_id, expected=DELETABLE_REQUEST_STATUSES):
                raise ConflictError(f"Study request {request_id} changed concurrently")

        logger.info(f"User {requester_id} deleted study request {request_id}")

    # ------------------------------------------------------------------ #
    # Matching
    # ------------------------------------------------------------------ #

    def select_teacher(self, request_id: int, teacher_id: int, student_id: int) -> StudyMatchRecord:
        """
        Send an open request to one teacher: creates a pending match.

        Notifies the teacher (new_request) and the student (request_sent).
        """
        with self._unit_of_work("select_teacher") as repo:
            request = self._get_request(repo, request_id)
            self._require_owner(request, student_id)

            if teacher_id == student_id:
                raise ValidationError("Cannot send a request to yourself", {'teacher_id': 'Choose another teacher'})

            transition = plan_transition(
                LifecycleEvent.SELECT_TEACHER,
                RequestStatus(request.status),
                self._open_match_status(repo, request_id)
            )

            teacher = self._get_user(repo, teacher_id)
            endorsement = repo.users.get_endorsement(teacher_id, request.skill_id)
            if endorsement is None or not endorsement.is_teaching or teacher.current_bubble_id is None:
                raise ValidationError(
                    f"User {teacher_id} is not an eligible teacher for study request {request_id}",
                    {'teacher_id': 'Not an eligible teacher for this skill'}
                )

            self._move_request(repo, request, transition)
            # Flush inside create() trips the open-match unique index on a race
            match = repo.matches.create(request_id=request_id, teacher_id=teacher_id, student_id=student_id)

            notifier = NotificationService(repo.notifications)
            notifier.notify(teacher_id, NotificationType.NEW_REQUEST, request.specific_topic)
            notifier.notify(student_id, NotificationType.REQUEST_SENT, request.specific_topic)

            record = StudyMatchRecord.from_model(match, transition.request_to, status=transition.match_to)

        logger.info(f"Study request {request_id} sent to teacher {teacher_id} (match {record.match_id})")
        return record

    def respond(self, request_id: int, teacher_id: int, accepted: bool) -> StudyMatchRecord:
        """
        Teacher accepts or declines a pending request.

        Accept makes request and match active. Decline marks the match
        declined and reopens the request so the student can pick someone else.
        A repeated response finds nothing pending and raises ConflictError.
        """
        event = LifecycleEvent.ACCEPT if accepted else LifecycleEvent.DECLINE

        with self._unit_of_work("respond") as repo:
            request = self._get_request(repo, request_id)
            match = repo.matches.get_open_for_request(request_id)

            if match is not None and match.teacher_id != teacher_id:
                raise UnauthorizedError(f"User {teacher_id} is not the teacher of study request {request_id}")

            transition = plan_transition(
                event,
                RequestStatus(request.status),
                MatchStatus(match.status) if match is not None else None
            )

            self._move_request(repo, request, transition)
            self._move_match(repo, match, transition)

            NotificationService(repo.notifications).notify(
                match.student_id,
                NotificationType.REQUEST_ACCEPTED if accepted else NotificationType.REQUEST_DECLINED,
                request.specific_topic
            )

            record = StudyMatchRecord.from_model(match, transition.request_to, status=transition.match_to)

        logger.info(f"Teacher {teacher_id} {'accepted' if accepted else 'declined'} study request {request_id}")
        return record

    def cancel_pending(self, request_id: int, requester_id: int) -> StudyRequestRecord:
        """
        Student withdraws a request before the teacher answered.

        Deletes the pending match, reopens the request, notifies the teacher.
        """
        with self._unit_of_work("cancel_pending") as repo:
            request = self._get_request(repo, request_id)
            self._require_owner(request, requester_id)
            match = repo.matches.get_open_for_request(request_id)

            transition = plan_transition(
                LifecycleEvent.CANCEL_PENDING,
                RequestStatus(request.status),
                MatchStatus(match.status) if match is not None else None
            )

            # Read before the row goes away
            teacher_id = match.teacher_id

            self._move_request(repo, request, transition)
            self._move_match(repo, match, transition)

            NotificationService(repo.notifications).notify(
                teacher_id, NotificationType.REQUEST_CANCELLED, request.specific_topic
            )

            record = StudyRequestRecord.from_model(request, status=transition.request_to)

        logger.info(f"User {requester_id} cancelled pending study request {request_id}")
        return record

    def cancel_active(self, match_id: int, actor_id: int) -> StudyMatchRecord:
        """Either participant cancels an active match; request and match become cancelled."""
        with self._unit_of_work("cancel_active") as repo:
            match = self._get_match(repo, match_id)
            self._require_participant(match, actor_id)
            request = self._get_request(repo, match.request_id)

            transition = plan_transition(
                LifecycleEvent.CANCEL_ACTIVE,
                RequestStatus(request.status),
                MatchStatus(match.status)
            )

            self._move_request(repo, request, transition)
            self._move_match(repo, match, transition)

            NotificationService(repo.notifications).notify(
                match.counterpart_of(actor_id), NotificationType.MATCH_CANCELLED, request.specific_topic
            )

            record = StudyMatchRecord.from_model(match, transition.request_to, status=transition.match_to)

        logger.info(f"User {actor_id} cancelled active match {match_id}")
        return record

    def complete(self, match_id: int, actor_id: int, rating: int, feedback: Optional[str] = None) -> CompletionResult:
        """
        Either participant marks an active match done.

        Stores the feedback on the request and records one rating from the
        actor about the other participant.
        """
        rating = validate_rating(rating)
        feedback = (feedback or "").strip() or None

        with self._unit_of_work("complete") as repo:
            match = self._get_match(repo, match_id)
            self._require_participant(match, actor_id)
            request = self._get_request(repo, match.request_id)

            transition = plan_transition(
                LifecycleEvent.COMPLETE,
                RequestStatus(request.status),
                MatchStatus(match.status)
            )

            self._move_request(repo, request, transition, feedback=feedback)
            self._move_match(repo, match, transition)

            rated_id = match.counterpart_of(actor_id)
            user_rating = repo.ratings.add(
                request_id=match.request_id,
                rater_id=actor_id,
                rated_id=rated_id,
                rating=rating,
                comment=feedback,
            )

            NotificationService(repo.notifications).notify(
                rated_id, NotificationType.MATCH_COMPLETED, request.specific_topic
            )

            result = CompletionResult(
                match=StudyMatchRecord.from_model(match, transition.request_to, status=transition.match_to),
                rating=RatingRecord.from_model(user_rating),
            )

        logger.info(f"User {actor_id} completed match {match_id} (rated user {rated_id}: {rating})")
        return result

    # ------------------------------------------------------------------ #
    # Bubbles
    # ------------------------------------------------------------------ #

    def join_bubble(self, user_id: int, bubble_id: int) -> bool:
        """
        Make a bubble the user's current bubble.

        Returns False if the user was already in it. Users in another bubble
        must leave it first so the leave cascade runs.
        """
        with self._unit_of_work("join_bubble") as repo:
            user = self._get_user(repo, user_id)
            if repo.users.get_bubble(bubble_id) is None:
                raise NotFoundError(f"Bubble {bubble_id} not found")

            if user.current_bubble_id == bubble_id:
                return False
            if user.current_bubble_id is not None:
                raise ConflictError(f"User {user_id} is already in bubble {user.current_bubble_id}; leave it first")

            if not repo.users.set_current_bubble(user_id, bubble_id, expected_bubble_id=None):
                raise ConflictError(f"User {user_id} changed bubble concurrently")

        logger.info(f"User {user_id} joined bubble {bubble_id}")
        return True

    def leave_bubble(self, user_id: int) -> LeaveBubbleResult:
        """
        Leave the current bubble, cancelling everything the user has going on in it.

        - Own requests (open/pending/matched/active) and their matches: cancelled
        - Pending matches where the user is the teacher: cancelled, request reopened
        - Active matches where the user is the teacher: both cancelled
        Counterparties are notified. Requests and matches in other bubbles are untouched.
        """
        with self._unit_of_work("leave_bubble") as repo:
            user = self._get_user(repo, user_id)
            bubble_id = user.current_bubble_id
            if bubble_id is None:
                raise ConflictError(f"User {user_id} is not in a bubble")

            result = LeaveBubbleResult(bubble_id=bubble_id)
            notifier = NotificationService(repo.notifications)

            for match in repo.matches.list_open_for_participant_in_bubble(user_id, bubble_id):
                request = self._get_request(repo, match.request_id)
                match_status = MatchStatus(match.status)

                if match.student_id == user_id:
                    event = LifecycleEvent.LEAVE_BUBBLE
                elif match_status == MatchStatus.PENDING:
                    event = LifecycleEvent.TEACHER_LEFT_PENDING
                else:
                    event = LifecycleEvent.TEACHER_LEFT_ACTIVE

                transition = plan_transition(event, RequestStatus(request.status), match_status)
                self._move_request(repo, request, transition)
                self._move_match(repo, match, transition)
                result.cancelled_match_ids.append(match.match_id)

                if transition.request_to == RequestStatus.OPEN:
                    result.reopened_request_ids.append(request.request_id)
                    notifier.notify(match.student_id, NotificationType.REQUEST_REOPENED, request.specific_topic)
                else:
                    result.cancelled_request_ids.append(request.request_id)
                    notifier.notify(
                        match.counterpart_of(user_id), NotificationType.PARTNER_LEFT_BUBBLE, request.specific_topic
                    )

            leave = LifecycleEvent.LEAVE_BUBBLE
            for request in repo.requests.list_for_requester_in_bubble(
                user_id, bubble_id, TRANSITIONS[leave].request_from
            ):
                transition = plan_transition(leave, RequestStatus(request.status), None)
                self._move_request(repo, request, transition)
                result.cancelled_request_ids.append(request.request_id)

            if not repo.users.set_current_bubble(user_id, None, expected_bubble_id=bubble_id):
                raise ConflictError(f"User {user_id} changed bubble concurrently")

        logger.info(
            f"User {user_id} left bubble {bubble_id}: "
            f"{len(result.cancelled_request_ids)} request(s) cancelled, "
            f"{len(result.cancelled_match_ids)} match(es) cancelled, "
            f"{len(result.reopened_request_ids)} request(s) reopened"
        )
        return result

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def update_profile(self, user_id: int, profile: ProfileUpdate) -> Dict[str, Optional[str]]:
        """
        Change the caller's own profile fields.

        Returns:
            The column values written

        Raises:
            ValidationError: nothing given, or a blank/malformed username or email
            NotFoundError: unknown user
            ConflictError: the email belongs to another account
        """
        changes = profile.changes()

        with self._unit_of_work("update_profile") as repo:
            if not repo.users.update_profile(user_id, **changes):
                raise NotFoundError(f"User {user_id} not found")

        logger.info(f"User {user_id} updated profile fields: {', '.join(sorted(changes))}")
        return changes

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _get_user(repo: TulenRepository, user_id: int):
        user = repo.users.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def _get_request(repo: TulenRepository, request_id: int) -> StudyRequest:
        request = repo.requests.get(request_id)
        if request is None:
            raise NotFoundError(f"Study request {request_id} not found")
        return request

    @staticmethod
    def _get_match(repo: TulenRepository, match_id: int) -> StudyMatch:
        match = repo.matches.get(match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")
        return match

    @staticmethod
    def _open_match_status(repo: TulenRepository, request_id: int) -> Optional[MatchStatus]:
        match = repo.matches.get_open_for_request(request_id)
        return MatchStatus(match.status) if match is not None else None

    @staticmethod
    def _require_owner(request: StudyRequest, user_id: int) -> None:
        if request.requester_id != user_id:
            raise UnauthorizedError(f"User {user_id} does not own study request {request.request_id}")

    @staticmethod
    def _require_participant(match: StudyMatch, user_id: int) -> None:
        if not match.has_participant(user_id):
            raise UnauthorizedError(f"User {user_id} is not a participant of match {match.match_id}")

    @staticmethod
    def _move_request(repo: TulenRepository, request: StudyRequest, transition: Transition, **values) -> None:
        moved = repo.requests.transition_status(
            request.request_id, transition.request_from, transition.request_to, **values
        )
        if not moved:
            raise ConflictError(f"Study request {request.request_id} changed concurrently")

    @staticmethod
    def _move_match(repo: TulenRepository, match: StudyMatch, transition: Transition) -> None:
        if transition.match_to is None:
            moved = repo.matches.delete_pending(match.match_id)
        else:
            moved = repo.matches.transition_status(
                match.match_id, transition.expected_match_statuses, transition.match_to
            )
        if not moved:
            raise ConflictError(f"Match {match.match_id} changed concurrently")

