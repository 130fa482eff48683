"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecordNotFoundError(DomainException):
    """Referenced record does not exist for this owner"""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection} '{record_id}' not found")
        self.collection = collection
        self.record_id = record_id


class InvalidCategoryError(DomainException):
    """Category label is not registered for the transaction kind"""

    pass


class DanglingCardReferenceError(DomainException):
    """Credit-card payment recorded against an unknown card"""

    pass


class DocumentStoreError(DomainException):
    """Remote document store rejected or never acknowledged a snapshot"""

    pass
