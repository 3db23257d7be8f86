# ==========================
# Request Coordinator
# ==========================


class RequestCoordinator:
    """
    Generation counter deciding whether a finished request may still commit

    Every issued request receives the generation current at issue time. Only a
    request whose token still equals the current generation is allowed to
    update visible state, whatever order the responses arrive in.
    Pure bookkeeping: no I/O, no locking (single event loop owner).
    """

    def __init__(self):
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin_request(self) -> int:
        """Start a new generation and return its token"""
        self._generation += 1
        return self._generation

    def invalidate(self) -> None:
        """Make every outstanding token stale without issuing a request"""
        self._generation += 1

    def is_stale(self, token: int) -> bool:
        return token != self._generation
