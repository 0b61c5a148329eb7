class DuplicateFieldId(ValueError):
    """Raised when adding a field whose id is already in the list."""

    def __init__(self, field_id: str):
        super().__init__(f"Field id already present: {field_id}")
        self.field_id = field_id
