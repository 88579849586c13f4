class NotAuthenticatedError(Exception):
    """No signed-in user is available."""

    def __init__(self, message: str = "User not logged in"):
        super().__init__(message)


class NotFoundError(Exception):
    """A document with the requested id does not exist for this user."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection[:-1].title()} not found: {doc_id}")
        self.collection = collection
        self.doc_id = doc_id
