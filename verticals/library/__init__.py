"""Library vertical: catalog and member rentals.

Brings the shared patterns together in one domain:
- SQLAlchemy models with IdentityMixin
- Async repositories with declarative optional-filter search
- Rental coordinator built on a single conditional-update transaction
- FastAPI router mapping typed outcomes to HTTP status codes
- Dataclass configuration
"""
