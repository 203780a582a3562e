class SpeciationError(Exception):
    """Base for all evospecies exceptions."""

    pass


class ConfigurationError(SpeciationError):
    """Parameters make offspring apportionment meaningless.

    Raised when the total adjusted fitness of a genus is not positive, so the
    average adjusted fitness cannot be computed.
    """

    pass


class OffspringAllocationError(SpeciationError):
    """Corrected offspring quotas do not add up to the requested total."""

    pass


class InvariantViolation(SpeciationError):
    """A caller contract breach or an internal bug.

    Not meant to be caught and recovered from: the population state that
    raised it can no longer be trusted.
    """

    pass
