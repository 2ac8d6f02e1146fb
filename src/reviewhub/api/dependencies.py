"""Request-scoped dependencies."""

from fastapi import Header


async def current_actor_id(x_user_id: str | None = Header(default=None)) -> str | None:
    """The acting user as supplied by the identity layer; ``None`` means anonymous."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()
