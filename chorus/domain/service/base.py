"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the comment rules that do not belong to the
    Comment entity itself, such as validation and cascade deletion.
    """

    pass
