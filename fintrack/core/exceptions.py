# fintrack/core/exceptions.py


class Unauthenticated(Exception):
    """Raised when a write or owner-scoped read is attempted without a signed-in user."""

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)
        self.detail = detail


def require_owner(owner_id):
    """Return owner_id, or raise Unauthenticated when there is none."""
    if owner_id is None:
        raise Unauthenticated()
    return owner_id
