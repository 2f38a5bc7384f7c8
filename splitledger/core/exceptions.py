class LedgerError(Exception):
    """Base class for every error raised by the ledger core."""


class NotFound(LedgerError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidArgument(LedgerError):
    pass


class PermissionDenied(LedgerError):
    pass


class StoreFailure(LedgerError):
    pass
