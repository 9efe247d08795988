class UnauthorizedError(Exception):
    pass


class NotFoundError(Exception):
    pass


class UnknownTableError(Exception):
    def __init__(self, table):
        super().__init__(f"Unknown table: {table}")
        self.table = table


class MissingFieldsError(Exception):
    def __init__(self, fields):
        super().__init__("Missing required fields: " + ", ".join(fields))
        self.fields = fields


class UnknownFieldsError(Exception):
    def __init__(self, fields):
        super().__init__("Unknown fields: " + ", ".join(fields))
        self.fields = fields
