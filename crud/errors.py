class NotFoundError(ValueError):
    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

class InvalidStatusTransition(ValueError):
    def __init__(self, entity: str, current, requested):
        super().__init__(f"{entity} cannot move from '{current.value}' to '{requested.value}'")
        self.current = current
        self.requested = requested

class CategoryCycleError(ValueError):
    pass
