"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the identity and access rules that span more than
    one aggregate or talk to an external collaborator through a port.
    """

    pass
