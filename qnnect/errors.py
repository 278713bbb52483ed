# Domain errors raised by the service layer.
# qnnect.main turns them into JSON responses carrying status_code.


class QnnectError(Exception):
    status_code = 400


class NotFound(QnnectError):
    status_code = 404


class Forbidden(QnnectError):
    status_code = 403


class Conflict(QnnectError):
    status_code = 409


class InvalidTransition(Conflict):
    def __init__(self, current: str, target: str):
        super().__init__(f"cannot move entry from {current} to {target}")
        self.current = current
        self.target = target


class QueueFull(Conflict):
    pass
