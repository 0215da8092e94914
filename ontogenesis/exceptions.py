"""Custom exception hierarchy for ontogenesis."""


class OntogenesisError(Exception):
    """Base for all ontogenesis errors."""


class KernelStateError(OntogenesisError):
    """Invalid kernel lifecycle transition."""


class PopulationTypeError(OntogenesisError, ValueError):
    """Kernel type does not match the population it is placed in."""


class TemplateNotFoundError(OntogenesisError):
    """No kernel template is registered for the requested kernel type."""
