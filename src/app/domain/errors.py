from __future__ import annotations


class RecipeServiceError(Exception):
    pass


class RecipeNotFoundError(RecipeServiceError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class PermissionDeniedError(RecipeServiceError):
    def __init__(self, action: str, viewer_id: str | None = None):
        super().__init__(f"Not allowed to {action}: viewer={viewer_id or 'anonymous'}")
        self.action = action
        self.viewer_id = viewer_id


class UserNotFoundError(RecipeServiceError):
    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class LastAdminError(RecipeServiceError):
    def __init__(self, message: str = "At least one administrator is required"):
        super().__init__(message)


class RepositoryError(RecipeServiceError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
