"""Exception types shared across the IVMS101 package."""


class ShapeError(ValueError):
    """Raised when a value does not have the shape its type requires.

    This covers constrained strings outside their length bounds, empty
    sequences where at least one element is required and inputs that match
    none of the variants of a union. Pydantic wraps it into its own
    ``ValidationError`` while decoding; builders raise it directly.
    """


class ValidationError(Exception):
    """Raised when a decoded message violates one of the IVMS101 business rules.

    Attributes:
        rule: Number of the violated constraint (1 for C1, ...).
        detail: Human readable description of the violation.
    """

    def __init__(self, detail: str, rule: int):
        self.detail = detail
        self.rule = rule
        super().__init__(f"Validation error: {detail} (IVMS101 C{rule})")

    @property
    def tag(self) -> str:
        return f"(IVMS101 C{self.rule})"
