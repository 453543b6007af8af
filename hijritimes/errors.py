class HijriTimesError(Exception):
    pass


class ValidationError(HijriTimesError, ValueError):
    """A caller-supplied value is outside its contract."""


class AstronomicalUndefined(HijriTimesError):
    """The sun never reaches the requested altitude on that day."""

    def __init__(self, event, angle, latitude=None):
        self.event = event
        self.angle = angle
        self.latitude = latitude
        where = f" at latitude {latitude:.4f}" if latitude is not None else ""
        super().__init__(f"Sun never reaches {angle:.3f}° for {event}{where}")


DomainError = AstronomicalUndefined


class InvariantViolation(HijriTimesError, RuntimeError):
    """Computed prayer times are out of order. Never recovered."""
