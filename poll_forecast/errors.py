"""Exceptions raised by the forecast engine and the poll loaders."""


class ForecastError(ValueError):
    """A forecast cannot be produced from the given polls."""


class EmptyInputError(ForecastError):
    pass


class NoValidPollsError(ForecastError):
    pass


class DegenerateRawAverageError(ForecastError):
    """A party's raw weighted average is exactly zero.

    The per-poll correction factor is final / raw, so it is undefined here.
    """

    def __init__(self, party):
        self.party = party
        super().__init__(f'Raw weighted average for {party.upper()} is 0, '
                         f'cannot back-propagate correction')


class PollSourceError(Exception):
    """A poll list could not be fetched or parsed."""
