from branch_connect.schemas.common import Notice


def failure_notice(title: str, description: str = "An unexpected error occurred. Please try again.") -> Notice:
    return Notice(title=title, description=description, variant="destructive")
