"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInput(DomainException):
    """Negative or zero amount, negative limit, or blank required name"""

    pass


class UnknownCategory(DomainException):
    """A template or transaction references a category id that does not exist"""

    def __init__(self, category_id: str):
        super().__init__(f"Unknown category: {category_id}")
        self.category_id = category_id


class MonthAlreadyOpen(DomainException):
    """A ledger already exists for the month"""

    def __init__(self, month):
        super().__init__(f"Month {month} is already open")
        self.month = month


class MonthNotOpen(DomainException):
    """No ledger exists for the month"""

    def __init__(self, month):
        super().__init__(f"Month {month} has not been opened")
        self.month = month


class InvalidDate(DomainException):
    """Malformed year or month"""

    pass
