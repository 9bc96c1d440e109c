class BoardException(Exception):
    """Base exception for the message board domain."""
    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

class BoardNotFoundException(BoardException):
    """Raised when no board exists under the requested name."""
    pass

class ThreadNotFoundException(BoardException):
    """Raised when a thread id is not present on the board."""
    pass

class ReplyNotFoundException(BoardException):
    """Raised when a reply id is not present on the thread."""
    pass

class IncorrectPasswordException(BoardException):
    """Raised when a delete password does not match the stored one."""
    pass

class PersistenceException(BoardException):
    """Raised when the storage layer fails to read or save a board."""
    pass

class InvalidPayloadException(BoardException):
    """Raised when a request body is missing required fields."""
    pass
