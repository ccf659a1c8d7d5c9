"""
Errors raised by the negotiation engine.

Each error is a DRF APIException, so views can let them propagate and DRF
renders them as {"detail": ..., "code": ...} with the matching status code.
Validation errors describe caller mistakes and are never retried;
PersistenceFailure is the only retryable kind.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class NegotiationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The negotiation request could not be completed.'
    default_code = 'negotiation_error'
    retryable = False


class NotFound(NegotiationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class Unauthorized(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not own this record.'
    default_code = 'unauthorized'


class InvalidTransition(NegotiationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This action is not allowed in the current state.'
    default_code = 'invalid_transition'


class RequestNotActive(NegotiationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This show request is not accepting bids.'
    default_code = 'request_not_active'


class DateOutOfWindow(NegotiationError):
    default_detail = 'The proposed date is outside the requested dates.'
    default_code = 'date_out_of_window'


class DateUnavailable(NegotiationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The venue is not available on this date.'
    default_code = 'date_unavailable'


class HoldLimitExceeded(NegotiationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This show request already has the maximum number of holds.'
    default_code = 'hold_limit_exceeded'


class InvalidCapacity(NegotiationError):
    default_detail = 'Capacity must be greater than zero.'
    default_code = 'invalid_capacity'


class PersistenceFailure(NegotiationError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'The change could not be saved. Please retry.'
    default_code = 'persistence_failure'
    retryable = True


class CascadeFailure(PersistenceFailure):
    """
    Raised when an accept cascade stops partway through.

    completed_steps are already durable; calling accept again on the same bid
    resumes with pending_steps without reapplying the finished ones.
    """

    def __init__(self, completed_steps, pending_steps, cause=None):
        self.completed_steps = list(completed_steps)
        self.pending_steps = list(pending_steps)
        self.cause = cause
        detail = {
            'detail': 'Accepting the bid stopped partway through. Retry to finish.',
            'completed_steps': self.completed_steps,
            'pending_steps': self.pending_steps,
        }
        super().__init__(detail=detail, code=self.default_code)
