"""Error taxonomy for the incident analysis engine.

Every error here is recoverable by the caller: retry with corrected input or
accept the partial output. None of them signals a broken process.
"""


class IncidentAnalysisError(ValueError):
    """Base class for all analysis errors"""


class EmptyInputError(IncidentAnalysisError):
    """Raised when a percentage or average would divide by zero"""


class InsufficientHistoryError(EmptyInputError):
    """Raised when the forecaster has no historical points to work from"""


class MalformedTimeError(IncidentAnalysisError):
    """Raised when a record's time field does not yield an hour in 0-23"""

    def __init__(self, time_value, incident_id=None):
        self.time_value = time_value
        self.incident_id = incident_id
        message = f"Cannot parse hour from time {time_value!r}"
        if incident_id is not None:
            message += f" (incident {incident_id})"
        super().__init__(message)


class InvalidParameterError(IncidentAnalysisError):
    """Raised for out-of-range parameters, before any computation starts"""
