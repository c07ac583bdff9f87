class ParaxrefError(Exception):
    pass


class DuplicateAnchorError(ParaxrefError):
    def __init__(self, anchor_id: str):
        super().__init__(f'An element with id "{anchor_id}" already exists in the rendered tree')
        self.anchor_id = anchor_id


class PandocNotInstalled(ParaxrefError):
    pass


class InvalidConfigError(ParaxrefError):
    pass
