"""Error handling utilities."""


class PhaseBoardError(Exception):
    """Base exception for the phase board backend."""
    pass


class SupabaseError(PhaseBoardError):
    """Supabase operation error."""
    pass


class AuthenticationError(PhaseBoardError):
    """Caller is not signed in, or sign-in could not be started."""
    pass


class TaskValidationError(PhaseBoardError):
    """Task input rejected before reaching the store."""
    pass


class TaskNotFoundError(PhaseBoardError):
    """Task or checklist item not present in the current snapshot."""
    pass


class CommentValidationError(PhaseBoardError):
    """Comment input rejected before reaching the store."""
    pass
