"""Engine error kinds.

Every failure is raised as a ``QuizError`` subclass carrying a stable
``code`` and the HTTP status the adapter should answer with. Only
``ConcurrentUpdateConflict`` is retryable.
"""


class QuizError(Exception):
    code = 'quiz_error'
    status_code = 400
    default_message = 'Quiz operation failed.'
    retryable = False

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class QuizNotLive(QuizError):
    code = 'quiz_not_live'
    default_message = 'Quiz has not started yet.'


class QuizExpired(QuizError):
    code = 'quiz_expired'
    status_code = 403
    default_message = 'The competition window has closed.'


class AlreadySubmitted(QuizError):
    code = 'already_submitted'
    default_message = 'Quiz already submitted.'


class AlreadyCorrect(QuizError):
    code = 'already_correct'
    default_message = 'Question already answered correctly.'


class NoAttemptsRemaining(QuizError):
    code = 'no_attempts_remaining'
    default_message = 'No attempts remaining.'


class NoHintsAvailable(QuizError):
    code = 'no_hints_available'
    default_message = 'No hints available.'


class NotFound(QuizError):
    code = 'not_found'
    status_code = 404
    default_message = 'Team or question not found.'


class ConcurrentUpdateConflict(QuizError):
    code = 'concurrent_update_conflict'
    status_code = 409
    default_message = 'The session was updated concurrently; retry the request.'
    retryable = True
