"""Condominium management backend.

Feature modules (structure, spaces, reservations, billing, ...) each keep the
same split: frozen dataclass models, a repository Protocol, a MySQL adapter,
a service holding the business rules and a thin Flask controller.
"""
