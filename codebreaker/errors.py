"""
Error taxonomy for everything that can go wrong talking to the score server.

- TransportError:         connection / IO failure, bad HTTP status, empty body
- MalformedResponseError: body came back but could not be parsed
- ValidationError:        empty or invalid local input; never sent anywhere

No connectivity is not an exception: RemoteClient.is_reachable() is checked
up front and the caller skips remote work. Business-rule answers (wrong
password, storage failure) arrive as verify result codes, see types.py.
"""


class CodebreakerError(Exception):
    pass


class TransportError(CodebreakerError):
    pass


class MalformedResponseError(CodebreakerError):
    pass


class ValidationError(CodebreakerError):
    pass


class SequencerStateError(CodebreakerError):
    """Raised when the sync flow is poked at the wrong moment."""
