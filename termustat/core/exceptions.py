"""Error taxonomy for slot decoding and course registration."""


class SlotCodecError(ValueError):
    """Base class for slot and exam decoding failures."""

    reason = 'invalid slot'

    def __init__(self, token, detail=None):
        self.token = token
        self.detail = detail
        message = f"{self.reason}: {token!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidDay(SlotCodecError):
    reason = 'invalid day value'


class InvalidTimeRange(SlotCodecError):
    reason = 'invalid time range'


class InvalidTime(SlotCodecError):
    reason = 'invalid time'


class EndBeforeStart(SlotCodecError):
    reason = 'end time must be after start time'


class InvalidExamWindow(SlotCodecError):
    reason = 'invalid exam window'


class RegistrationError(ValueError):
    """Raised when a scraped record cannot become a typed course."""
